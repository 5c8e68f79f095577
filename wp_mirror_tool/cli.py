"""CLI entry point for wp-mirror-tool.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import click

from wp_mirror_tool import __version__
from wp_mirror_tool.mirror.commands.lock_commands import (
    lock_check_command,
    lock_release_command,
)
from wp_mirror_tool.mirror.commands.queue_commands import (
    queue_peek_command,
    queue_size_command,
)
from wp_mirror_tool.mirror.commands.sync_commands import (
    run_command,
    sync_command,
    workers_command,
)
from wp_mirror_tool.mirror.commands.table_commands import create_table_command
from wp_mirror_tool.mirror.commands.version_commands import (
    latest_command,
    seed_command,
    versions_command,
)


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Mirror WordPress core, plugin and theme releases into a local cache"""
    pass


# Register table commands
main.add_command(create_table_command)

# Register sync and worker commands
main.add_command(sync_command)
main.add_command(workers_command)
main.add_command(run_command)

# Register queue commands
main.add_command(queue_size_command)
main.add_command(queue_peek_command)

# Register lock commands
main.add_command(lock_check_command)
main.add_command(lock_release_command)

# Register version store commands
main.add_command(versions_command)
main.add_command(latest_command)
main.add_command(seed_command)

if __name__ == "__main__":
    main()
