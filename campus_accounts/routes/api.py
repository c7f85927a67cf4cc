"""JSON API for verification, login, registration and profiles."""

from typing import Any, Dict, Optional
import json
import logging

from fastapi import APIRouter, Depends, Request, status
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from .. import domain
from ..controllers import AuthFlow, ImageUpload, ProfileFlow, \
    RegistrationFlow
from ..controllers.profile import ProfileData
from ..exceptions import InvalidRequest
from .dependencies import access_claims, auth_flow, optional_email, \
    profile_flow, refresh_claims, registration_flow

logger = logging.getLogger(__name__)

router = APIRouter()

PROFILE_LIST_FIELDS = ('positions', 'technologies', 'awards', 'links')


class EmailCodeRequest(domain.CamelModel):
    id: Optional[str] = None


class EmailConfirmation(domain.CamelModel):
    id: Optional[str] = None
    code: Optional[str] = None


class Credentials(domain.CamelModel):
    id: Optional[str] = None
    password: Optional[str] = None


class Visibility(domain.CamelModel):
    will_open_information: Optional[bool] = None


@router.post('/auth/code/email', status_code=status.HTTP_201_CREATED)
async def request_code(body: EmailCodeRequest,
                       flow: AuthFlow = Depends(auth_flow)) -> Dict[str, Any]:
    """Email a verification code to the address in ``id``."""
    await flow.request_code(body.id)
    return {'isAuth': True}


@router.post('/auth/email')
async def confirm_code(body: EmailConfirmation,
                       flow: AuthFlow = Depends(auth_flow)) -> Dict[str, Any]:
    await flow.confirm_code(body.id, body.code)
    return {'isAuth': True}


@router.post('/auth/login')
async def login(body: Credentials,
                flow: AuthFlow = Depends(auth_flow)) -> Dict[str, Any]:
    result = await flow.login(body.id, body.password)
    return {'data': result.model_dump(by_alias=True, exclude_none=True)}


@router.post('/auth/join', status_code=status.HTTP_201_CREATED)
async def join(body: domain.Registration,
               flow: RegistrationFlow = Depends(registration_flow)) \
        -> Dict[str, Any]:
    await flow.register(body)
    return {'isJoin': True}


@router.post('/token/refreshToken')
async def refresh_token(claims: domain.TokenClaims = Depends(refresh_claims),
                        flow: AuthFlow = Depends(auth_flow)) -> Dict[str, Any]:
    """Exchange a refresh token for a new access token."""
    result = await flow.refresh_access_token(claims)
    return {'data': result.model_dump(by_alias=True)}


@router.get('/profile')
async def get_profile(id: Optional[str] = None,
                      requester: Optional[str] = Depends(optional_email),
                      flow: ProfileFlow = Depends(profile_flow)) \
        -> Dict[str, Any]:
    if not id:
        raise InvalidRequest()
    return _profile_response(await flow.get_profile(id, requester))


@router.put('/profile')
async def update_profile(request: Request,
                         claims: domain.TokenClaims = Depends(access_claims),
                         flow: ProfileFlow = Depends(profile_flow)) \
        -> Dict[str, Any]:
    """
    Replace the requester's profile with the submitted form.

    List fields are sent as JSON strings; missing or empty fields are
    cleared. ``image`` is either a file to upload or a string, which keeps
    the current image.
    """
    form = await request.form()
    values: Dict[str, Any] = {
        name: _json_field(form.get(name)) for name in PROFILE_LIST_FIELDS
    }
    values['introduction'] = form.get('introduction') or None
    try:
        update = domain.ProfileUpdate.model_validate(values)
    except ValidationError as e:
        logger.debug('Invalid profile form: %s', e)
        raise InvalidRequest() from e

    image = form.get('image')
    if isinstance(image, UploadFile):
        image = ImageUpload(await image.read(), image.filename or 'image')
    elif not image:
        image = None
    return _profile_response(
        await flow.update_profile(claims.email, update, image)
    )


@router.patch('/profile/open')
async def set_open(body: Visibility,
                   claims: domain.TokenClaims = Depends(access_claims),
                   flow: ProfileFlow = Depends(profile_flow)) \
        -> Dict[str, Any]:
    if body.will_open_information is None:
        raise InvalidRequest()
    is_open = await flow.set_open(claims.email, body.will_open_information)
    return {'isOpen': is_open}


def _json_field(value: Any) -> Any:
    if not value or not isinstance(value, str):
        return None
    try:
        return json.loads(value)
    except ValueError as e:
        raise InvalidRequest() from e


def _profile_response(data: ProfileData) -> Dict[str, Any]:
    """Closed profiles are sent bare; otherwise the score goes along."""
    profile, score = data
    info = profile.model_dump(by_alias=True, exclude_none=True)
    if score is None:
        return info
    return {'profileInfo': info, 'profileScore': score}
