# tests/test_hello_handler.py
import json
import unittest

from lambdas.hello.app import handler

# A trimmed API Gateway proxy event, like the one the REST API sends.
SAMPLE_PROXY_EVENT = {
    "resource": "/hello",
    "path": "/hello",
    "httpMethod": "POST",
    "headers": {"Content-Type": "application/json"},
    "queryStringParameters": None,
    "body": json.dumps({"name": "World"}),
    "isBase64Encoded": False,
}


class TestHelloHandler(unittest.TestCase):

    def assert_greeting(self, response):
        self.assertEqual(response["statusCode"], 200)
        self.assertEqual(json.loads(response["body"]), {"message": "Hello from Lambda!"})

    def test_empty_event(self):
        self.assert_greeting(handler({}, None))

    def test_proxy_event_is_ignored(self):
        self.assert_greeting(handler(SAMPLE_PROXY_EVENT, None))

    def test_missing_event(self):
        self.assert_greeting(handler())

    def test_non_json_values_in_event(self):
        self.assert_greeting(handler({"when": object(), "items": [1, 2, 3]}, object()))

    def test_body_is_a_string(self):
        response = handler({}, None)
        self.assertIsInstance(response["body"], str)
        self.assertEqual(response["headers"]["Content-Type"], "application/json")


if __name__ == '__main__':
    unittest.main()
