import logging
import urllib.error
import urllib.request
from dataclasses import dataclass
from urllib.parse import urlparse

from editor_link.config import EditorLinkConfig

logger = logging.getLogger(__name__)


@dataclass
class HealthCheckResult:
    name: str
    passed: bool
    detail: str


def run_startup_checks(config: EditorLinkConfig) -> list[HealthCheckResult]:
    results = [
        _check_relay_url(config),
        _check_identity(config),
        _check_retry_delay(config),
        _check_board_config_reachable(config),
    ]

    passed = sum(1 for r in results if r.passed)

    logger.info("Health check: %d/%d passed", passed, len(results))
    for result in results:
        level = logging.INFO if result.passed else logging.WARNING
        symbol = "OK" if result.passed else "FAIL"
        logger.log(level, "  [%s] %s: %s", symbol, result.name, result.detail)

    return results


def has_critical_failures(results: list[HealthCheckResult]) -> bool:
    critical_checks = {"relay_url", "identity", "retry_delay"}
    return any(not r.passed and r.name in critical_checks for r in results)


def _check_relay_url(config: EditorLinkConfig) -> HealthCheckResult:
    name = "relay_url"
    parsed = urlparse(config.relay_url)
    if parsed.scheme not in ("ws", "wss"):
        return HealthCheckResult(
            name=name, passed=False, detail=f"'{config.relay_url}' is not a ws:// or wss:// URL"
        )
    if not parsed.hostname:
        return HealthCheckResult(name=name, passed=False, detail=f"'{config.relay_url}' has no host")
    return HealthCheckResult(name=name, passed=True, detail=config.relay_url)


def _check_identity(config: EditorLinkConfig) -> HealthCheckResult:
    name = "identity"
    identity = config.identity_name()
    if not identity:
        return HealthCheckResult(name=name, passed=False, detail="No host name available")
    return HealthCheckResult(name=name, passed=True, detail=f"Announcing as editor '{identity}'")


def _check_retry_delay(config: EditorLinkConfig) -> HealthCheckResult:
    name = "retry_delay"
    if config.retry_delay_seconds <= 0:
        return HealthCheckResult(
            name=name, passed=False, detail=f"Must be positive, got {config.retry_delay_seconds}"
        )
    return HealthCheckResult(name=name, passed=True, detail=f"{config.retry_delay_seconds:.1f}s")


def _check_board_config_reachable(config: EditorLinkConfig) -> HealthCheckResult:
    name = "board_config"
    if not config.board_config_url:
        return HealthCheckResult(name=name, passed=True, detail="Skipped (no URL configured)")
    try:
        req = urllib.request.Request(config.board_config_url, method="GET")
        req.add_header("User-Agent", "editor-link/healthcheck")
        response = urllib.request.urlopen(req, timeout=3)
        return HealthCheckResult(name=name, passed=True, detail=f"Reachable ({response.status})")
    except urllib.error.URLError as exc:
        reason = str(exc.reason) if hasattr(exc, "reason") else str(exc)
        return HealthCheckResult(name=name, passed=False, detail=f"Unreachable: {reason}")
    except Exception as exc:
        return HealthCheckResult(name=name, passed=False, detail=f"Unreachable: {exc}")
