"""Tests for the mail and object storage services."""

from typing import Any
from unittest import mock, TestCase
import smtplib

from botocore.exceptions import ClientError

from campus_accounts.exceptions import MailDeliveryFailed, StorageFailed
from campus_accounts.services import Database, mail, storage


class TestSendVerificationCode(TestCase):
    """:meth:`.MailSession.send_verification_code` mails the code."""

    @mock.patch('campus_accounts.services.mail.smtplib.SMTP')
    def test_send(self, mock_smtp: Any) -> None:
        """The code is in the body of an HTML message to the address."""
        conn = mock_smtp.return_value.__enter__.return_value
        session = mail.MailSession('smtp.example.com', 587, 'bot@example.com',
                                   'pw')
        session.send_verification_code('foo@bar.com', 'AbC123xY')

        mock_smtp.assert_called_once_with(host='smtp.example.com', port=587,
                                          timeout=10.0)
        conn.starttls.assert_called_once()
        conn.login.assert_called_once_with('bot@example.com', 'pw')
        message = conn.send_message.call_args[0][0]
        self.assertEqual(message['To'], 'foo@bar.com')
        self.assertEqual(message['From'], 'bot@example.com')
        self.assertEqual(message['Subject'], mail.VERIFICATION_SUBJECT)
        self.assertEqual(message.get_content_subtype(), 'html')
        self.assertIn('AbC123xY', message.get_content())

    @mock.patch('campus_accounts.services.mail.smtplib.SMTP')
    def test_no_login_without_user(self, mock_smtp: Any) -> None:
        conn = mock_smtp.return_value.__enter__.return_value
        session = mail.MailSession('smtp.example.com', 25,
                                   sender='bot@example.com')
        session.send_verification_code('foo@bar.com', 'AbC123xY')
        conn.login.assert_not_called()

    @mock.patch('campus_accounts.services.mail.smtplib.SMTP')
    def test_refused(self, mock_smtp: Any) -> None:
        """SMTP errors are raised as :class:`.MailDeliveryFailed`."""
        conn = mock_smtp.return_value.__enter__.return_value
        conn.send_message.side_effect = \
            smtplib.SMTPRecipientsRefused({'foo@bar.com': (550, b'no')})
        session = mail.MailSession('smtp.example.com', 587)
        with self.assertRaises(MailDeliveryFailed):
            session.send_verification_code('foo@bar.com', 'AbC123xY')

    @mock.patch('campus_accounts.services.mail.smtplib.SMTP')
    def test_unreachable(self, mock_smtp: Any) -> None:
        mock_smtp.side_effect = ConnectionRefusedError()
        session = mail.MailSession('smtp.example.com', 587)
        with self.assertRaises(MailDeliveryFailed):
            session.send_verification_code('foo@bar.com', 'AbC123xY')


class TestObjectStorage(TestCase):
    """:class:`.ObjectStorage` wraps an S3 client."""

    def setUp(self) -> None:
        self.client = mock.MagicMock()
        self.storage = storage.ObjectStorage('images', 'ap-northeast-2',
                                             'key', 'secret', url_expires=60,
                                             client=self.client)
        self.error = ClientError({'Error': {'Code': '500'}}, 'PutObject')

    def test_get_object_url(self) -> None:
        self.client.generate_presigned_url.return_value = 'https://signed'
        self.assertEqual(self.storage.get_object_url('profile/a.png'),
                         'https://signed')
        self.client.generate_presigned_url.assert_called_once_with(
            'get_object',
            Params={'Bucket': 'images', 'Key': 'profile/a.png'},
            ExpiresIn=60
        )

    def test_upload(self) -> None:
        key = self.storage.upload(b'data', 'profile/a.png')
        self.assertEqual(key, 'profile/a.png')
        self.client.put_object.assert_called_once_with(
            Bucket='images', Key='profile/a.png', Body=b'data'
        )

    def test_delete(self) -> None:
        self.storage.delete('profile/a.png')
        self.client.delete_object.assert_called_once_with(
            Bucket='images', Key='profile/a.png'
        )

    def test_failures(self) -> None:
        """Client errors are raised as :class:`.StorageFailed`."""
        self.client.put_object.side_effect = self.error
        self.client.delete_object.side_effect = self.error
        self.client.generate_presigned_url.side_effect = self.error
        with self.assertRaises(StorageFailed):
            self.storage.upload(b'data', 'profile/a.png')
        with self.assertRaises(StorageFailed):
            self.storage.delete('profile/a.png')
        with self.assertRaises(StorageFailed):
            self.storage.get_object_url('profile/a.png')


class TestDatabase(TestCase):
    """:meth:`.Database.is_available` reports whether the store responds."""

    def test_available(self) -> None:
        db = Database('sqlite://')
        self.assertTrue(db.is_available())
        db.close()
