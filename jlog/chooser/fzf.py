import shlex
import subprocess

from jlog.chooser.base import Chooser


class FzfChooser(Chooser):
    """Pipes items to fzf (or a compatible picker) and reads back the choice.

    fzf draws its UI on /dev/tty, so stdout only carries the selected line.
    Exit code 1 (no match) and 130 (Esc / Ctrl-C) both mean "no selection".
    """

    def __init__(self, command="fzf"):
        self.command = shlex.split(command) if isinstance(command, str) else list(command)

    def offer(self, items):
        try:
            proc = subprocess.Popen(
                self.command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                text=True,
            )
        except FileNotFoundError:
            raise RuntimeError(
                f"'{self.command[0]}' not found. Install fzf or run: jlog config chooser prompt"
            )

        # stdin must be closed before stdout is read or the picker waits forever.
        try:
            try:
                for item in items:
                    proc.stdin.write(f"{item}\n")
            except BrokenPipeError:
                pass  # picker exited early (e.g. Esc before reading everything)
            finally:
                try:
                    proc.stdin.close()
                except BrokenPipeError:
                    pass
            output = proc.stdout.read()
        except BaseException:
            proc.kill()
            raise
        finally:
            proc.stdout.close()
            proc.wait()

        selection = output.strip()
        return selection or None
