from adlsproxy.types.base import ProxyBaseModel

__all__ = ["ProxyBaseModel"]
