from __future__ import annotations
import csv
import datetime as dt
import io
import logging
from dataclasses import asdict, dataclass

import aiohttp

from .models import UserState

logger = logging.getLogger(__name__)

CSV_HEADERS = ["Timestamp", "MaHocSinh", "DiemSo", "TongSoCau"]
TIMESTAMP_FORMAT = "%d/%m/%Y, %H:%M:%S"


@dataclass(frozen=True)
class ResultPayload:
    timestamp: str
    studentCode: str
    score: int
    totalQuestionsAnswered: int

    @classmethod
    def from_state(cls, state: UserState, now: dt.datetime | None = None) -> "ResultPayload":
        now = now or dt.datetime.now()
        return cls(
            timestamp=now.strftime(TIMESTAMP_FORMAT),
            studentCode=state.student_code,
            score=state.score,
            totalQuestionsAnswered=state.answered,
        )

    def as_dict(self) -> dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class SubmitOutcome:
    ok: bool
    error: str | None = None  # missing | sheet_link | network


def validate_webhook_url(url: str | None) -> str | None:
    if not url or not url.strip():
        return "missing"
    if "docs.google.com/spreadsheets" in url:
        return "sheet_link"
    return None


def render_csv(payload: ResultPayload) -> bytes:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    writer.writerow([payload.timestamp, payload.studentCode, payload.score, payload.totalQuestionsAnswered])
    return ("\ufeff" + buf.getvalue()).encode("utf-8")


class ResultsClient:
    """Posts a finished session to the spreadsheet web app.

    The web app answers with a redirect page we never read; any HTTP response
    counts as delivered, only transport errors are failures.

    The body keys are ``timestamp``, ``studentCode``, ``score`` and
    ``totalQuestionsAnswered``. A sheet script written for the older
    ``maHocSinh``/``diemSo``/``tongSoCau`` keys must be updated to read these.
    """

    def __init__(self, url: str | None, *, timeout_sec: float = 15.0) -> None:
        self.url = (url or "").strip() or None
        self.timeout_sec = timeout_sec

    async def _post(self, body: dict[str, object]) -> None:
        timeout = aiohttp.ClientTimeout(total=self.timeout_sec)
        async with aiohttp.ClientSession(timeout=timeout) as http:
            async with http.post(self.url, json=body) as resp:
                await resp.release()

    async def submit(self, payload: ResultPayload) -> SubmitOutcome:
        problem = validate_webhook_url(self.url)
        if problem:
            logger.error("results_submitted: ok=false reason=%s", problem)
            return SubmitOutcome(ok=False, error=problem)
        try:
            await self._post(payload.as_dict())
        except Exception:
            logger.warning("results_submitted: ok=false reason=network", exc_info=True)
            return SubmitOutcome(ok=False, error="network")
        logger.info(
            "results_submitted: ok=true student=%s score=%s answered=%s",
            payload.studentCode,
            payload.score,
            payload.totalQuestionsAnswered,
        )
        return SubmitOutcome(ok=True)
