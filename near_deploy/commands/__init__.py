"""
Command handlers for near-deploy.
"""
from .dev_deploy import dev_deploy
from .js import deploy as js_deploy, remove as js_remove

__all__ = ['dev_deploy', 'js_deploy', 'js_remove']
