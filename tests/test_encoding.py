import unittest

from v4signer.encoding import base16_encode, encode_path, encode_query_component
from v4signer.exceptions import EncodingError


class TestEncoding(unittest.TestCase):

    def test_unreserved_characters_are_left_alone(self) -> None:
        unreserved = 'ABCXYZabcxyz0189-._~'
        self.assertEqual(encode_path(unreserved), unreserved)
        self.assertEqual(encode_query_component(unreserved), unreserved)

    def test_slash_is_only_kept_in_paths(self) -> None:
        self.assertEqual(encode_path('/a/b'), '/a/b')
        self.assertEqual(encode_query_component('/a/b'), '%2Fa%2Fb')

    def test_space_is_percent_encoded_not_plus(self) -> None:
        self.assertEqual(encode_query_component('a b+c'), 'a%20b%2Bc')

    def test_reserved_characters_use_uppercase_hex(self) -> None:
        self.assertEqual(encode_query_component('=&;:@*'), '%3D%26%3B%3A%40%2A')

    def test_existing_escapes_are_not_decoded(self) -> None:
        self.assertEqual(encode_path('/my%20file'), '/my%2520file')

    def test_multibyte_utf8_is_encoded_bytewise(self) -> None:
        self.assertEqual(encode_path('/é'), '/%C3%A9')
        self.assertEqual(encode_query_component('€'), '%E2%82%AC')
        self.assertEqual(encode_query_component('\U0001F600'), '%F0%9F%98%80')

    def test_lone_surrogate_raises_encoding_error(self) -> None:
        with self.assertRaises(EncodingError):
            encode_path('/\ud800')

    def test_base16_is_uppercase(self) -> None:
        self.assertEqual(base16_encode(b'\x00\xab\x10\xff'), '00AB10FF')
        self.assertEqual(base16_encode(b''), '')


if __name__ == '__main__':
    unittest.main(verbosity=2)
