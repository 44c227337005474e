"""Narrow Docker CLI runtime: exec and copy into running containers.

Container lifecycle (compose up/down, build, start/stop) is not handled
here -- the stack is expected to be running already.

Usage:
    from wpdev_backup.adapters.docker import DockerRuntime

    docker = DockerRuntime()
    if docker.container_exists("webdevwordpress-db"):
        docker.exec("webdevwordpress-db", ["mysqladmin", "ping", "--silent"])
"""

from collections.abc import Mapping, Sequence
from pathlib import Path

from wpdev_backup.adapters.runner import CommandResult, run_command


class DockerRuntime:
    """Runs ``docker`` subcommands through ``run_command``.

    Args:
        docker_bin: Docker executable name or path.
        timeout: Optional per-command timeout in seconds.
    """

    def __init__(self, docker_bin: str = "docker", timeout: float | None = None) -> None:
        self._docker_bin = docker_bin
        self._timeout = timeout

    def _call_timeout(self, timeout: float | None) -> float | None:
        return self._timeout if timeout is None else timeout

    def container_exists(self, name: str, timeout: float | None = None) -> bool:
        """Return True if a container (running or stopped) has exactly this name.

        ``timeout`` overrides the runtime's default for this call.
        """
        result = run_command(
            [self._docker_bin, "ps", "-a", "--format", "{{.Names}}"],
            timeout=self._call_timeout(timeout),
        )
        return name in {line.strip() for line in result.stdout.splitlines()}

    def exec(
        self,
        container: str,
        argv: Sequence[str],
        env: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """Run a command inside a container and return its captured output.

        ``env`` values are exported to the ``docker`` client's environment
        and forwarded by name (``-e KEY``), so they never appear in argv.
        """
        cmd = [self._docker_bin, "exec"]
        for key in env or {}:
            cmd.extend(["-e", key])
        cmd.append(container)
        cmd.extend(argv)
        return run_command(
            cmd, env=dict(env) if env else None, timeout=self._call_timeout(timeout)
        )

    def copy_to(self, src: Path, container: str, dest: str) -> None:
        """Copy a host file into a container path."""
        run_command(
            [self._docker_bin, "cp", str(src), f"{container}:{dest}"],
            timeout=self._timeout,
        )

    def copy_from(self, container: str, src: str, dest: Path) -> None:
        """Copy a container file to a host path."""
        run_command(
            [self._docker_bin, "cp", f"{container}:{src}", str(dest)],
            timeout=self._timeout,
        )
