"""Sub-commands of `octoctl`."""
