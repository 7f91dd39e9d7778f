from __future__ import annotations

import ssl

import certifi

_SSL_CTX: ssl.SSLContext | None = None


def get_ssl_context() -> ssl.SSLContext:
    """Contexto TLS compartilhado: CA bundle do certifi, TLS 1.2 ou superior."""
    global _SSL_CTX

    if _SSL_CTX is None:
        ctx = ssl.create_default_context(cafile=certifi.where())
        ctx.minimum_version = ssl.TLSVersion.TLSv1_2
        ctx.check_hostname = True
        ctx.verify_mode = ssl.CERT_REQUIRED
        _SSL_CTX = ctx

    return _SSL_CTX
