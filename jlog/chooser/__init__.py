from jlog.chooser.fzf import FzfChooser
from jlog.chooser.prompt import PromptChooser


def create_chooser(name="fzf"):
    """Create a chooser from the `chooser` config value.

    "fzf" (default) or "prompt"; any other value is run as an fzf-compatible
    command line, e.g. "sk" or "fzf --height 40%".
    """
    if name == "prompt":
        return PromptChooser()
    if not name or name == "fzf":
        return FzfChooser()
    return FzfChooser(command=name)
