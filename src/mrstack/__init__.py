"""Keep stacks of dependent GitLab merge requests in order."""
