import hashlib
import hmac
import unittest
from unittest.mock import patch

from v4signer.exceptions import CryptoPrimitiveError
from v4signer.hashing import sha256_hex
from v4signer.scope import CredentialScope, derive_signing_key


class TestCredentialScope(unittest.TestCase):

    def test_scope_string(self) -> None:
        scope = CredentialScope('20120525', 'us-east-1', 'glacier')

        self.assertEqual(scope.get(), '20120525/us-east-1/glacier/aws4_request')
        self.assertEqual(str(scope), scope.get())

    def test_date_stamp_comes_from_timestamp(self) -> None:
        scope = CredentialScope.from_timestamp('20150830T123600Z', 'eu-west-1', 'service')

        self.assertEqual(scope, CredentialScope('20150830', 'eu-west-1', 'service'))


class TestSigningKey(unittest.TestCase):

    def test_documented_signing_key(self) -> None:
        # see: https://docs.aws.amazon.com/general/latest/gr/signature-v4-examples.html
        scope = CredentialScope('20120215', 'us-east-1', 'iam')

        key = derive_signing_key('wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY', scope)

        self.assertEqual(key.hex(), 'f4780e2d9f65fa895f9c67b32ce1baf0b0d8a43505a000a1a9e090d414db404d')

    def test_chain_order(self) -> None:
        def sign(key: bytes, msg: str) -> bytes:
            return hmac.new(key, msg.encode('utf-8'), hashlib.sha256).digest()

        expected = sign(sign(sign(sign(b'AWS4s\xc3\xa9cret', '20240101'), 'ap-south-1'), 'execute-api'), 'aws4_request')

        self.assertEqual(derive_signing_key('sécret', CredentialScope('20240101', 'ap-south-1', 'execute-api')), expected)

    def test_primitive_failure_is_wrapped(self) -> None:
        with patch('v4signer.hashing.hmac.new', side_effect=ValueError('unsupported hash type')):
            with self.assertRaises(CryptoPrimitiveError) as context:
                derive_signing_key('secret', CredentialScope('20240101', 'us-east-1', 's3'))

        self.assertIsInstance(context.exception.__cause__, ValueError)


class TestSha256(unittest.TestCase):
    GLACIER_CANONICAL_REQUEST = (
        "PUT\n"
        "/-/vaults/examplevault\n"
        "\n"
        "host:glacier.us-east-1.amazonaws.com\n"
        "x-amz-date:20120525T002453Z\n"
        "x-amz-glacier-version:2012-06-01\n"
        "\n"
        "host;x-amz-date;x-amz-glacier-version\n"
        "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    )

    def test_sha256_of_canonical_request(self) -> None:
        self.assertEqual(
            sha256_hex(self.GLACIER_CANONICAL_REQUEST),
            '5f1da1a2d0feb614dd03d71e87928b8e449ac87614479332aced3a701f916743'
        )

    def test_sha256_of_empty_bytes(self) -> None:
        self.assertEqual(sha256_hex(b''), 'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855')

    def test_hash_failure_is_wrapped(self) -> None:
        with patch('v4signer.hashing.hashlib.new', side_effect=ValueError('unsupported hash type')):
            with self.assertRaises(CryptoPrimitiveError):
                sha256_hex('anything')


if __name__ == '__main__':
    unittest.main(verbosity=2)
