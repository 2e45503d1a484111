"""Firma AWS Signature V4 de los requests de metering (botocore).

La firma cubre método, path, query y headers. El payload se firma como string
vacío: el servicio de metering autentica la línea del request y los headers,
no los bytes del body JSON. El hash de ese payload vacío viaja también como
header `X-Amz-Content-SHA256` y forma parte de los headers firmados.
"""

from __future__ import annotations

import hashlib

from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials

from core.config import AppSettings
from core.domain.models import RequestDescriptor

EMPTY_PAYLOAD = ""
EMPTY_PAYLOAD_SHA256 = hashlib.sha256(EMPTY_PAYLOAD.encode()).hexdigest()
CONTENT_SHA256_HEADER = "X-Amz-Content-SHA256"


class RequestSigner:
    """Añade los headers de autenticación SigV4 a un `RequestDescriptor`."""

    def __init__(self, service: str = "s3", region: str = "us-east-1") -> None:
        self.service = service
        self.region = region

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "RequestSigner":
        return cls(service=settings.signing_service, region=settings.signing_region)

    def sign(
        self,
        descriptor: RequestDescriptor,
        access_key: str,
        secret_key: str,
    ) -> RequestDescriptor:
        """Devuelve una copia de `descriptor` con los headers de firma.

        Raises:
            botocore.exceptions.BotoCoreError: Si no es posible firmar.
        """

        headers = dict(descriptor.headers)
        headers[CONTENT_SHA256_HEADER] = EMPTY_PAYLOAD_SHA256
        request = AWSRequest(
            method=descriptor.method,
            url=descriptor.url,
            data=EMPTY_PAYLOAD,
            headers=headers,
        )
        credentials = Credentials(access_key, secret_key)
        SigV4Auth(credentials, self.service, self.region).add_auth(request)

        signed = {name: str(value) for name, value in request.headers.items()}
        return descriptor.model_copy(update={"headers": signed})
