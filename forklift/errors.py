from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(eq=False)
class HarnessError(Exception):
    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"ok": False, "error": {"code": self.code, "message": self.message}}
        if self.details:
            payload["error"]["details"] = self.details
        return payload


class ProcessLaunchFailure(HarnessError):
    def __init__(self, command: list[str], reason: str) -> None:
        super().__init__(
            "PROCESS_LAUNCH_FAILED",
            f"Failed to start process {command[0] if command else '(empty)'}: {reason}",
            details={"command": list(command), "reason": reason},
        )


class ProcessExitFailure(HarnessError):
    def __init__(self, command: list[str], exit_code: int, stdout: str, stderr: str) -> None:
        super().__init__(
            "PROCESS_EXIT_NONZERO",
            f"Process exited with code {exit_code}.\n\n"
            f"Stdout:\n{stdout or '(no output)'}\n"
            f"Stderr:\n{stderr or '(no output)'}",
            details={"command": list(command), "exit_code": exit_code},
        )
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr


class OutputParseFailure(HarnessError):
    def __init__(self, reason: str, stdout: str, stderr: str = "") -> None:
        super().__init__(
            "OUTPUT_PARSE_FAILED",
            f"Failed to parse process output as JSON ({reason}).\n"
            f"Stdout:\n{stdout}\nStderr:\n{stderr}",
            details={"reason": reason},
        )
        self.stdout = stdout
        self.stderr = stderr


class ConfigParseFailure(HarnessError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            "CONFIG_PARSE_FAILED",
            f"Failed to parse existing config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class DuplicateProfileFailure(HarnessError):
    def __init__(self, name: str, path: str) -> None:
        super().__init__(
            "DUPLICATE_PROFILE",
            f"Profile {name} already exists in {path}",
            details={"profile": name, "path": path},
        )


class InvalidPrivateKey(HarnessError):
    def __init__(self, reason: str) -> None:
        super().__init__("INVALID_PRIVATE_KEY", f"Invalid Ed25519 private key: {reason}")


class ProfileNotFound(HarnessError):
    def __init__(self, name: str) -> None:
        super().__init__("PROFILE_NOT_FOUND", f"Profile {name} not found", details={"profile": name})


class InvalidSessionOptions(HarnessError):
    def __init__(self, message: str, **details: Any) -> None:
        super().__init__("INVALID_SESSION_OPTIONS", message, details=details)


class SessionInitFailure(HarnessError):
    def __init__(self, result: Any) -> None:
        super().__init__(
            "SESSION_INIT_FAILED",
            f"Simulation session init failed: expected Result = Success, got {result!r}",
            details={"result": result},
        )


class InvalidFundingAmount(HarnessError):
    def __init__(self, amount: Any, reason: str) -> None:
        super().__init__(
            "INVALID_FUNDING_AMOUNT",
            f"Invalid funding amount {amount!r}: {reason}",
            details={"amount": str(amount), "reason": reason},
        )


class FundingFailure(HarnessError):
    def __init__(self, operation: str, result: Any) -> None:
        super().__init__(
            "FUNDING_FAILED",
            f"{operation} failed: {result!r}",
            details={"operation": operation, "result": result},
        )


class FaucetUnavailable(HarnessError):
    NO_FAUCET = "no_faucet"
    MANUAL_AUTH = "manual_auth"
    NOT_CONFIGURED = "not_configured"

    def __init__(self, network: str, reason: str) -> None:
        if reason == self.NO_FAUCET:
            text = f"fund_account is not supported on {network}: no faucet exists"
        elif reason == self.MANUAL_AUTH:
            text = (
                f"fund_account is not supported on {network}: faucet requires web UI "
                "with authentication (https://aptos.dev/network/faucet)"
            )
        else:
            text = f"fund_account is not supported on {network}: no faucet URL configured"
        super().__init__("FAUCET_UNAVAILABLE", text, details={"network": network, "reason": reason})
        self.reason = reason


class NetworkRequestFailure(HarnessError):
    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        super().__init__(
            "NETWORK_REQUEST_FAILED",
            f"Request to {url} failed: {reason}",
            details={"url": url, "status_code": status_code, "reason": reason},
        )
        self.status_code = status_code


class UnsupportedInMode(HarnessError):
    def __init__(self, operation: str, mode: str, hint: str = "") -> None:
        message = f"{operation} is not supported in {mode} mode."
        if hint:
            message = f"{message} {hint}"
        super().__init__("UNSUPPORTED_IN_MODE", message, details={"operation": operation, "mode": mode})


class ManifestError(HarnessError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__("MANIFEST_INVALID", f"{reason} ({path})", details={"path": path})


class ChainStateUnavailable(HarnessError):
    def __init__(self, what: str) -> None:
        super().__init__("CHAIN_STATE_UNAVAILABLE", f"Failed to get {what}", details={"resource": what})


class HarnessReleasedFailure(HarnessError):
    def __init__(self, operation: str) -> None:
        super().__init__(
            "HARNESS_RELEASED",
            "Harness is poisoned: cleanup() has already been called",
            details={"operation": operation},
        )
