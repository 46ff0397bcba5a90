"""Run a command inside a throwaway git branch or worktree."""
