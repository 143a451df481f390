import subprocess
from ..cli_logger import logger

# Return code reported when the command could not be started at all
NOT_RUN = -1

def run_shell_command(command, env=None, input_data=None, cwd=None):
    """
    Executes a command and captures its output.

    Args:
        command (list): The command to execute as a list of strings.
        env (dict, optional): A dictionary of environment variables.
        input_data (str, optional): Data to be passed to the command's stdin.
        cwd (str, optional): The working directory for the command.

    Returns:
        A tuple (stdout, stderr, return_code). When the command cannot be
        started, stdout is empty, stderr holds the reason and return_code is NOT_RUN.
    """
    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            env=env,
            input=input_data,
            check=False,
            cwd=cwd
        )
        return result.stdout, result.stderr, result.returncode

    except FileNotFoundError as e:
        logger.error(f"Command not found: {e.filename}")
        return "", f"command not found: {e.filename}", NOT_RUN
    except OSError as e:
        logger.error(f"Could not run {command[0]}: {e}")
        return "", str(e), NOT_RUN
