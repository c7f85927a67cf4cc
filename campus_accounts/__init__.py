"""
Campus accounts service.

The accounts service is a FastAPI application responsible for who a user is
and whether they may act: it verifies ownership of email addresses with
short-lived codes, registers ordinary and student accounts, logs users in
with access and refresh tokens, and serves user profiles together with a
completeness score that other services use to rank user-facing data.

Context
-------
A user first asks for a verification code, which is mailed to them and must
be confirmed within five minutes. They then register with the verified
address as their id. Student accounts are checked against the university's
student registry, and each student can hold only one account.

Logging in yields an access token, sent as a bearer token with each request,
and a refresh token used solely to obtain new access tokens. Tokens are
signed JWTs and are not stored server-side.

Profiles are optional free-form data (positions, technologies, introduction,
awards, links, an image). Owners decide whether others can see them; see
:mod:`campus_accounts.scoring` for the completeness score.

Quick start
-----------

.. code-block:: bash

   CREATE_DB=1 JWT_SECRET=... uvicorn campus_accounts.asgi:app

"""
