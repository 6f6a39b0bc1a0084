# lambdas/hello/app.py
import json

GREETING = {"message": "Hello from Lambda!"}


def handler(event=None, context=None):
    """
    Integration target for every route of the API.
    The event is logged and otherwise ignored.
    """
    # default=str keeps the log line from failing on non-JSON values
    print(f"Received event: {json.dumps(event if event is not None else {}, default=str)}")

    return {
        "statusCode": 200,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(GREETING)
    }
