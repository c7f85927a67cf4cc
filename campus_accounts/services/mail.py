"""Provides an API for sending verification email."""

from email.message import EmailMessage
import logging
import smtplib

from ..exceptions import MailDeliveryFailed

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = 'Email verification'


class MailSession(object):
    """
    Sends messages through an SMTP service.

    A new connection is opened for each message, so a single instance can be
    shared by concurrent requests.
    """

    def __init__(self, host: str = "", port: int = 0, user: str = "",
                 password: str = "", sender: str = "",
                 timeout: float = 10.0) -> None:
        self._host = host
        self._port = port
        self._user = user
        self._password = password
        self._sender = sender or user
        self._timeout = timeout

    def _new_connection(self) -> smtplib.SMTP:
        return smtplib.SMTP(
            host=self._host,
            port=self._port,
            timeout=self._timeout
        )

    def send(self, to: str, subject: str, html_body: str) -> None:
        """
        Send an HTML message.

        Raises
        ------
        :class:`MailDeliveryFailed`
            The SMTP service could not be reached or refused the message.

        """
        message = EmailMessage()
        message['From'] = self._sender
        message['To'] = to
        message['Subject'] = subject
        message.set_content(html_body, subtype='html')
        try:
            with self._new_connection() as conn:
                conn.starttls()
                if self._user:
                    conn.login(self._user, self._password)
                conn.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise MailDeliveryFailed(f'Could not send mail: {e}') from e
        logger.debug('Sent "%s" message', subject)

    def send_verification_code(self, to: str, code: str) -> None:
        """Send the verification code for ``to``."""
        self.send(to, VERIFICATION_SUBJECT,
                  f'<p> Your email verification code is {code}. </p>')
