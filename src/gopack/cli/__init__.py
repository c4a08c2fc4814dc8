"""
CLI support modules

Output and configuration helpers shared by the commands in gopack.main.
"""

from gopack.cli import config, output

__all__ = ['config', 'output']
