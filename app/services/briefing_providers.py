# path: trip-briefing-api/app/services/briefing_providers.py

from __future__ import annotations

from datetime import datetime
from typing import Callable, Dict, List, Optional, Protocol, Tuple
import logging
import random

import httpx
from pydantic import BaseModel, ValidationError

from app.models.progress_models import Briefing, BriefingSource, ProgressReport
from app.services.briefing import derive_local_briefing, progress_tips, welcome_briefing

logger = logging.getLogger(__name__)


MAX_MODEL_TIPS = 4
# InvalidURL is not an HTTPError; a mistyped endpoint must not escape as a 500.
REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL)
TIP_BULLETS = ("-", "*", "•")


class BriefingUnavailable(Exception):
    """A briefing collaborator could not produce an answer."""


class BriefingProvider(Protocol):
    name: str

    def get_briefing(self, report: ProgressReport, days_traveled: int = 0) -> Briefing:
        ...


class RemoteBriefing(BaseModel):
    summary: str
    tips: List[str]


def briefing_payload(report: ProgressReport, days_traveled: int = 0) -> Dict[str, float]:
    return {
        "latitude": report.current_location.latitude,
        "longitude": report.current_location.longitude,
        "distance_traveled": float(report.completed_distance),
        "distance_left": float(report.remaining_distance),
        "days_traveled": days_traveled,
    }


def _with_assistant_text(
    report: ProgressReport,
    summary: str,
    tips: List[str],
    source: BriefingSource,
    rng: Optional[random.Random],
    clock: Callable[[], datetime],
) -> Briefing:
    # Greeting, time and weather lines are always ours; the assistant supplies summary and tips.
    base = derive_local_briefing(report, rng=rng, now=clock())
    return base.model_copy(update={"progress_summary": summary, "tips": tips, "source": source})


class RemoteHTTPProvider:
    name = "remote"

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._rng = rng
        self._clock = clock

    def _post(self, url: str, payload: dict) -> httpx.Response:
        if self._client is not None:
            return self._client.post(url, json=payload, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(url, json=payload)

    def get_briefing(self, report: ProgressReport, days_traveled: int = 0) -> Briefing:
        url = f"{self.base_url}/briefing"
        try:
            response = self._post(url, briefing_payload(report, days_traveled))
            response.raise_for_status()
            remote = RemoteBriefing.model_validate(response.json())
        except httpx.TimeoutException as exc:
            raise BriefingUnavailable(f"{url} timed out") from exc
        except httpx.HTTPStatusError as exc:
            raise BriefingUnavailable(f"{url} returned HTTP {exc.response.status_code}") from exc
        except REQUEST_ERRORS as exc:
            raise BriefingUnavailable(f"{url} failed: {exc}") from exc
        except ValidationError as exc:
            raise BriefingUnavailable(f"{url} returned an unexpected body") from exc
        except ValueError as exc:
            raise BriefingUnavailable(f"{url} did not return JSON") from exc

        return _with_assistant_text(report, remote.summary, remote.tips, "remote", self._rng, self._clock)


class ModelRuntime(Protocol):
    def is_ready(self) -> bool:
        ...

    def generate(self, prompt: str) -> str:
        ...


class HTTPModelRuntime:
    """A model served on the device/LAN behind a small generate endpoint."""

    def __init__(
        self,
        base_url: str,
        model: str,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self._client = client

    def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        if self._client is not None:
            return self._client.request(method, url, timeout=self.timeout, **kwargs)
        with httpx.Client(timeout=self.timeout) as client:
            return client.request(method, url, **kwargs)

    def is_ready(self) -> bool:
        try:
            response = self._send("GET", f"{self.base_url}/api/tags")
        except REQUEST_ERRORS as exc:
            logger.warning("Local model runtime %s is not reachable: %s", self.base_url, exc)
            return False
        return response.status_code == 200

    def generate(self, prompt: str) -> str:
        try:
            response = self._send(
                "POST",
                f"{self.base_url}/api/generate",
                json={"model": self.model, "prompt": prompt, "stream": False},
            )
            response.raise_for_status()
            return str(response.json().get("response", ""))
        except (*REQUEST_ERRORS, ValueError, AttributeError) as exc:
            raise BriefingUnavailable(f"Local model generate failed: {exc}") from exc


def build_prompt(report: ProgressReport, days_traveled: int = 0) -> str:
    p = briefing_payload(report, days_traveled)
    return (
        "You are a friendly walking trip assistant. "
        f"The traveler is at latitude {p['latitude']}, longitude {p['longitude']}. "
        f"They have walked {p['distance_traveled']:.2f} km, have {p['distance_left']:.2f} km left, "
        f"and have been traveling for {p['days_traveled']} days. "
        "Reply with one short summary sentence on the first line, then up to three "
        "practical tips, each on its own line starting with '-'."
    )


def parse_model_output(text: str) -> Tuple[str, List[str]]:
    summary = ""
    tips = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        if line.startswith(TIP_BULLETS):
            tip = line.lstrip("".join(TIP_BULLETS)).strip()
            if tip:
                tips.append(tip)
        elif not summary:
            summary = line
    if not summary:
        raise BriefingUnavailable("Local model returned no summary")
    return summary, tips[:MAX_MODEL_TIPS]


class LocalModelProvider:
    name = "local_model"

    def __init__(
        self,
        runtime: ModelRuntime,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.runtime = runtime
        self._rng = rng
        self._clock = clock

    def get_briefing(self, report: ProgressReport, days_traveled: int = 0) -> Briefing:
        if not self.runtime.is_ready():
            raise BriefingUnavailable("Local model is not ready")
        summary, tips = parse_model_output(self.runtime.generate(build_prompt(report, days_traveled)))
        if not tips:
            # Prose-only answer: keep the rule tips so the list is never empty.
            tips = progress_tips(report.progress_percentage, report.weather)
        return _with_assistant_text(report, summary, tips, "local_model", self._rng, self._clock)


class RuleBasedProvider:
    name = "rules"

    def __init__(self, rng: Optional[random.Random] = None, clock: Callable[[], datetime] = datetime.now):
        self._rng = rng
        self._clock = clock

    def get_briefing(self, report: Optional[ProgressReport], days_traveled: int = 0) -> Briefing:
        return derive_local_briefing(report, rng=self._rng, now=self._clock())


def is_reachable(url: str, timeout: float = 2.0, client: Optional[httpx.Client] = None) -> bool:
    try:
        if client is not None:
            response = client.head(url, timeout=timeout)
        else:
            response = httpx.head(url, timeout=timeout)
    except REQUEST_ERRORS:
        return False
    return response.status_code < 500


class BriefingService:
    """
    Picks a briefing transport from connectivity and falls back down the chain:
    online -> remote endpoint, then local model; offline -> local model.
    The rule cascade always answers last.
    """

    def __init__(
        self,
        remote: Optional[RemoteHTTPProvider] = None,
        local_model: Optional[LocalModelProvider] = None,
        rules: Optional[RuleBasedProvider] = None,
        probe: Callable[[str], bool] = is_reachable,
    ):
        self.remote = remote
        self.local_model = local_model
        self.rules = rules or RuleBasedProvider()
        self._probe = probe

    def is_online(self) -> bool:
        if self.remote is None:
            return False
        return self._probe(self.remote.base_url)

    def select_providers(self, online: bool) -> List[BriefingProvider]:
        chain = []
        if online and self.remote is not None:
            chain.append(self.remote)
        if self.local_model is not None:
            chain.append(self.local_model)
        chain.append(self.rules)
        return chain

    def get_briefing(
        self,
        report: Optional[ProgressReport],
        online: Optional[bool] = None,
        days_traveled: int = 0,
    ) -> Briefing:
        if report is None:
            return welcome_briefing()
        if online is None:
            online = self.is_online()

        *assistants, last_resort = self.select_providers(online)
        for provider in assistants:
            try:
                return provider.get_briefing(report, days_traveled)
            except BriefingUnavailable as exc:
                logger.warning("Briefing provider %s failed, falling back: %s", provider.name, exc)
        return last_resort.get_briefing(report, days_traveled)
