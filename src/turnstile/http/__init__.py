"""HTTP value types: request, response and headers."""

from turnstile.http.headers import Headers
from turnstile.http.request import HttpRequest, Method
from turnstile.http.response import HttpResponse

__all__ = ["Headers", "HttpRequest", "HttpResponse", "Method"]
