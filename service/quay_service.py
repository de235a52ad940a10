# service/quay_service.py
import asyncio
import logging
import httpx
from typing import Final
from pydantic import ValidationError
from config.settings import settings
from core.tag_selection import select_latest, split_identifier, strip_digest_prefix
from model.quay import QuayTagResponse
from model.status import StatusKind, StatusRecord
from util.constants import ExternalURIs
from util.timing import timed

logger = logging.getLogger(__name__)

MAX_REDIRECTS: Final[int] = 10


def _decoder_message(err: ValidationError) -> str:
    parts = []
    for e in err.errors():
        loc = ".".join(str(x) for x in e.get("loc", ()))
        msg = e.get("msg", "")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)


class QuayService:
    """
    Resolves the freshness of one Quay repository from its tag listing.

    `resolve` never raises: every failure is reported through the returned
    StatusRecord so the UI can show it next to the operator.
    """

    def __init__(
        self,
        *,
        host: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._host: str = host if host is not None else settings.REGISTRY_HOST
        self._timeout: float = (
            timeout if timeout is not None else settings.REGISTRY_TIMEOUT_SECONDS
        )
        if self._timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self._timeout}")
        self._transport = transport

    def tags_url(self, namespace: str, repository: str) -> str:
        return ExternalURIs.QUAY_TAGS.format(
            host=self._host, namespace=namespace, repository=repository
        )

    async def resolve(self, operator: str) -> StatusRecord:
        segments = split_identifier(operator)
        if segments is None:
            logger.info("quay.operator.invalid operator=%s", operator)
            return StatusRecord.failure(operator, StatusKind.invalid_format)

        url = self.tags_url(*segments)
        with timed(logger, "quay.fetch", operator=operator):
            try:
                # httpx timeouts are per phase; this bounds the whole call
                fetched = await asyncio.wait_for(
                    self._fetch(operator, url), timeout=self._timeout
                )
            except asyncio.TimeoutError:
                logger.error("quay.timeout operator=%s", operator)
                return StatusRecord.failure(operator, StatusKind.connect_failure)
        if isinstance(fetched, StatusRecord):
            return fetched

        logger.debug(
            "quay.raw operator=%s body=%s",
            operator,
            fetched.decode("utf-8", errors="replace"),
        )

        try:
            parsed = QuayTagResponse.model_validate_json(fetched)
        except ValidationError as e:
            message = _decoder_message(e)
            logger.error("quay.parse.error operator=%s err=%s", operator, message)
            return StatusRecord.failure(
                operator, StatusKind.parse_failure, message=message
            )

        if not parsed.tags:
            return StatusRecord.failure(operator, StatusKind.empty)

        latest = select_latest(parsed.tags)
        if latest is None:
            logger.warning(
                "quay.tags.no_valid_time operator=%s tags=%d",
                operator,
                len(parsed.tags),
            )
            return StatusRecord.failure(operator, StatusKind.no_valid_timestamps)

        tag, last_updated = latest
        logger.info(
            "quay.status.ok operator=%s tag=%s last_modified=%s",
            operator,
            tag.name,
            tag.last_modified,
        )
        return StatusRecord.ok(
            operator, last_updated, strip_digest_prefix(tag.manifest_digest)
        )

    async def _fetch(self, operator: str, url: str) -> bytes | StatusRecord:
        """
        GET the tag listing. Returns the raw body, or a failure record for
        connect errors, non-200 answers and body read errors.
        """
        timeout = httpx.Timeout(self._timeout)
        async with httpx.AsyncClient(
            timeout=timeout,
            transport=self._transport,
            follow_redirects=True,
            max_redirects=MAX_REDIRECTS,
        ) as client:
            try:
                async with client.stream("GET", url) as res:
                    if res.status_code != 200:
                        logger.warning(
                            "quay.bad_status operator=%s status=%d",
                            operator,
                            res.status_code,
                        )
                        return StatusRecord.failure(
                            operator, StatusKind.http_status, code=res.status_code
                        )
                    try:
                        return await res.aread()
                    except httpx.TimeoutException as e:
                        logger.error(
                            "quay.read.timeout operator=%s err=%s",
                            operator,
                            type(e).__name__,
                        )
                        return StatusRecord.failure(
                            operator, StatusKind.connect_failure
                        )
                    except (httpx.RequestError, httpx.StreamError) as e:
                        logger.error(
                            "quay.read.error operator=%s err=%s",
                            operator,
                            type(e).__name__,
                        )
                        return StatusRecord.failure(operator, StatusKind.read_failure)
            except (httpx.RequestError, httpx.InvalidURL) as e:
                logger.error(
                    "quay.request_error operator=%s err=%s", operator, type(e).__name__
                )
                return StatusRecord.failure(operator, StatusKind.connect_failure)
