"""
Hygieia Build Publisher

Publishes build, pipeline-stage, code-quality and generic artifact data to
one or more Hygieia dashboard services when a build starts and completes.

Usage:
    from hygieia_publisher.listener import HygieiaBuildListener
    from hygieia_publisher.secure_config import get_config

    listener = HygieiaBuildListener(get_config().get_publisher_config())
    listener.on_build_completed(build, console)
"""

__version__ = "1.0.0"
