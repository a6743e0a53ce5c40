"""Domain layer for scopekit.

Pure models and functions with no I/O:

- shared: Result monad, clock and id helpers
- task: scope models, tree traversal, status propagation
- project: folder models and the reserved Unassigned folder
- outline: parsing of AI-produced outlines into scope trees
"""
