"""Run ``dutch-tax-income-calculator`` through a Node.js subprocess."""

from __future__ import annotations

import json
import logging
import os
import subprocess
from typing import Any, Mapping

from dutchtax.backend.config.box1_config import EngineSettings

from .engine import PAYCHECK_FIGURES, PaycheckEngineError, PaycheckParameters

_LOGGER = logging.getLogger(__name__)

NODE_BINARY_ENV = "DUTCHTAX_NODE_BINARY"
NODE_WORKDIR_ENV = "DUTCHTAX_NODE_WORKDIR"
NODE_TIMEOUT_ENV = "DUTCHTAX_NODE_TIMEOUT"

# Reads one JSON request from stdin and writes the numeric paycheck figures to
# stdout. ``import()`` resolves the package from the working directory's
# node_modules and accepts both the CommonJS and ES module builds.
_BRIDGE_SCRIPT = """
let raw = '';
process.stdin.setEncoding('utf8');
process.stdin.on('data', (chunk) => { raw += chunk; });
process.stdin.on('end', async () => {
  try {
    const request = JSON.parse(raw);
    const mod = await import(request.package);
    const SalaryPaycheck = mod.SalaryPaycheck || (mod.default && mod.default.SalaryPaycheck);
    if (typeof SalaryPaycheck !== 'function') {
      throw new Error(`${request.package} does not export SalaryPaycheck`);
    }
    const paycheck = new SalaryPaycheck(
      request.salary, request.startFrom, request.year, request.ruling
    );
    const figures = {};
    for (const field of request.fields) {
      const value = paycheck[field];
      if (typeof value === 'number' && Number.isFinite(value)) {
        figures[field] = value;
      }
    }
    process.stdout.write(JSON.stringify(figures));
  } catch (error) {
    process.stderr.write(String((error && error.stack) || error));
    process.exit(1);
  }
});
"""


def _timeout_from_env(default: float) -> float:
    raw = os.getenv(NODE_TIMEOUT_ENV, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        _LOGGER.warning("Ignoring non-numeric %s=%r", NODE_TIMEOUT_ENV, raw)
        return default
    return value if value > 0 else default


class NodePaycheckEngine:
    """Paycheck engine backed by the ``SalaryPaycheck`` class of the npm package."""

    def __init__(
        self,
        *,
        node_binary: str = "node",
        package: str = "dutch-tax-income-calculator",
        working_directory: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.node_binary = node_binary
        self.package = package
        self.working_directory = working_directory
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: EngineSettings) -> NodePaycheckEngine:
        return cls(
            node_binary=os.getenv(NODE_BINARY_ENV, "").strip() or settings.node_binary,
            package=settings.package,
            working_directory=(
                os.getenv(NODE_WORKDIR_ENV, "").strip() or settings.working_directory
            ),
            timeout=_timeout_from_env(settings.timeout_seconds),
        )

    def _build_request(self, parameters: PaycheckParameters) -> str:
        request = parameters.to_payload()
        request["package"] = self.package
        request["fields"] = list(PAYCHECK_FIGURES.values())
        return json.dumps(request)

    def calculate(self, parameters: PaycheckParameters) -> Mapping[str, Any]:
        """Return the paycheck figures for ``parameters`` keyed by engine name."""

        try:
            completed = subprocess.run(
                [self.node_binary, "-e", _BRIDGE_SCRIPT],
                input=self._build_request(parameters),
                capture_output=True,
                text=True,
                timeout=self.timeout,
                cwd=self.working_directory,
                check=False,
            )
        except FileNotFoundError as exc:
            raise PaycheckEngineError(
                f"Node.js executable '{self.node_binary}' was not found"
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise PaycheckEngineError(
                f"Paycheck engine timed out after {self.timeout:g}s"
            ) from exc

        if completed.returncode != 0:
            stderr = (completed.stderr or "").strip()
            reason = stderr.splitlines()[0] if stderr else f"exit status {completed.returncode}"
            raise PaycheckEngineError(f"Paycheck engine failed: {reason}")

        try:
            figures = json.loads(completed.stdout)
        except json.JSONDecodeError as exc:
            raise PaycheckEngineError("Paycheck engine returned invalid JSON") from exc

        if not isinstance(figures, dict):
            raise PaycheckEngineError("Paycheck engine returned an unexpected payload")

        return figures


__all__ = ["NodePaycheckEngine"]
