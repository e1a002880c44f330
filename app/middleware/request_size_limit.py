"""Request body size limit middleware.

Identity requests are small JSON documents; anything larger than
max_bytes is rejected with 413 before it reaches a route. A declared
Content-Length is checked up front; a body without one is buffered up to
the limit and replayed to the app. Raw ASGI.
"""

from typing import Callable

from app.middleware._asgi import get_header, send_json_error


async def _reject(send: Callable, max_bytes: int) -> None:
    await send_json_error(
        send,
        413,
        "PAYLOAD_TOO_LARGE",
        f"Request body must be at most {max_bytes} bytes",
        {"max_bytes": max_bytes},
    )


def RequestSizeLimitMiddleware(app: Callable, max_bytes: int) -> Callable:
    """Reject request bodies over max_bytes."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        declared = get_header(scope, "content-length")
        if declared is not None:
            if declared.strip().isdigit() and int(declared) > max_bytes:
                await _reject(send, max_bytes)
                return
            await app(scope, receive, send)
            return

        body = bytearray()
        while True:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            body.extend(message.get("body", b""))
            if len(body) > max_bytes:
                await _reject(send, max_bytes)
                return
            if not message.get("more_body", False):
                break

        replayed = False

        async def replay() -> dict:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": bytes(body), "more_body": False}
            return await receive()

        await app(scope, replay, send)

    return asgi_app
