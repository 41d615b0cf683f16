"""
Spoken prompt playback through the system text-to-speech command.
"""
import logging
import shutil
import subprocess

logger = logging.getLogger(__name__)

SAY_COMMAND = "say"


def speak_prompt(text: str, command: str = SAY_COMMAND) -> bool:
    """
    Speak a prompt and wait until playback finishes.

    Failures are logged and never abort the session.

    Returns:
        True if the prompt was played
    """
    executable = shutil.which(command)
    if executable is None:
        logger.warning(f"⚠️ '{command}' not found, skipping spoken prompt")
        return False

    logger.info(f"🔊 Speaking prompt: {text}")
    try:
        subprocess.run([executable, text], check=True)
    except (subprocess.CalledProcessError, OSError) as e:
        logger.warning(f"⚠️ Prompt playback failed: {e}")
        return False
    return True
