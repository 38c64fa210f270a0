"""local-dev — 本地依赖包链接工具

通过外部包管理器的 link 原语把本地检出的包接入当前工程，
并将链接状态同步到 package.json 的 localDependencies 中。
"""

__version__ = "1.0.0"
