"""Run kubectl for auxiliary text dumps, with at most three invocations in flight."""

from __future__ import annotations

import asyncio
import logging
import os

from kube_dump.errors import KubectlError

logger = logging.getLogger(__name__)

MAX_CONCURRENCY = 3


class Kubectl:
    """Invokes kubectl; a disabled instance turns every call into a no-op returning None."""

    def __init__(
        self,
        enabled: bool,
        path: str = "kubectl",
        kubeconfig: str | None = None,
        context: str | None = None,
    ) -> None:
        self.enabled = enabled
        self.path = path
        self._global_args: list[str] = []
        if kubeconfig:
            self._global_args += ["--kubeconfig", str(kubeconfig)]
        if context:
            self._global_args += ["--context", context]
        self._sem = asyncio.Semaphore(MAX_CONCURRENCY)

    @classmethod
    def disabled(cls) -> Kubectl:
        return cls(enabled=False)

    @classmethod
    async def try_new(
        cls,
        path: str = "kubectl",
        kubeconfig: str | None = None,
        context: str | None = None,
    ) -> Kubectl:
        """Probe kubectl; on any failure log a warning and return a disabled instance."""
        kubectl = cls(enabled=True, path=path, kubeconfig=kubeconfig, context=context)
        try:
            await kubectl.exec("version", "--client")
        except (OSError, KubectlError) as e:
            logger.warning("Kubectl integration will be disabled: %s", e)
            return cls.disabled()
        return kubectl

    async def exec(self, *args: str) -> str | None:
        """Run kubectl with ``args`` and return its stdout; None if disabled."""
        if not self.enabled:
            return None
        async with self._sem:
            proc = await asyncio.create_subprocess_exec(
                self.path,
                *self._global_args,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env={**os.environ, "TERM": "dumb"},
            )
            try:
                stdout, stderr = await proc.communicate()
            except BaseException:
                # cancelled or failed mid-run: do not leave the child behind
                if proc.returncode is None:
                    try:
                        proc.kill()
                    except ProcessLookupError:
                        pass
                await proc.wait()
                raise
        if proc.returncode != 0:
            raise KubectlError(
                f"kubectl {' '.join(args)} exited with {proc.returncode}: "
                f"{stderr.decode('utf-8', errors='replace').strip()}"
            )
        return stdout.decode("utf-8", errors="replace")
