from dotdep.tui.renderers import DeployConsoleUI

__all__ = ["DeployConsoleUI"]
