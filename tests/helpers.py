def raw_request(uri="/", method="GET", headers=None, body=b"") -> bytes:
    lines = [f"{method} {uri} HTTP/1.1", "Host: localhost:8080"]
    for k, v in (headers or {}).items():
        lines.append(f"{k}: {v}")
    return ("\r\n".join(lines) + "\r\n\r\n").encode() + body


class CountingHandler:
    """Answers 200 "inner" and counts its invocations."""

    def __init__(self, code=200, body=b"inner"):
        self.calls = 0
        self.code = code
        self.body = body

    async def handle(self, request, response):
        self.calls += 1
        response.write_status(self.code)
        response.write(self.body)
