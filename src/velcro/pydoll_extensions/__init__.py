from .tab_wrapper import TabWrapper

__all__ = ["TabWrapper"]
