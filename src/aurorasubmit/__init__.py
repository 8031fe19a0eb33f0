"""Aurora Submit - open pull requests against the community content repository.

Manages:
  - GitHub OAuth login and a locally stored access token
  - Metadata extraction from skin (.xzp) and coverflow (.cfljson) files
  - A local submission queue checked against the published manifest
  - One batch pull request per queue, committed through a fork
"""

__version__ = "0.1.0"
