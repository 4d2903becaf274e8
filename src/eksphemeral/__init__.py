"""eksphemeral — command-line front-end for ephemeral EKS clusters.

Cluster provisioning, teardown and status polling are delegated to the
``eksp-*.sh`` scripts found under ``$EKSPHEMERAL_HOME``.
"""

from eksphemeral.version import __version__

__all__: list[str] = ["__version__"]
