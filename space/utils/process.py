import asyncio
import logging

from ..core.exceptions import CommandError


async def run(*cmd: str) -> bytes:
    """
    Run a command and return its captured stdout.

    A nonzero exit raises CommandError with stderr attached. When the calling
    task is cancelled the child process is killed before the cancellation
    propagates.
    """
    logging.debug(f"Running command: {' '.join(cmd)}")

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd, stdout=asyncio.subprocess.PIPE, stderr=asyncio.subprocess.PIPE
        )
    except OSError as e:
        raise CommandError(cmd, reason=str(e)) from e

    try:
        stdout, stderr = await process.communicate()
    except asyncio.CancelledError:
        if process.returncode is None:
            process.kill()
            await process.wait()
        raise

    if process.returncode != 0:
        error_msg = stderr.decode(errors="replace") if stderr else ""
        raise CommandError(cmd, returncode=process.returncode, stderr=error_msg)

    return stdout
