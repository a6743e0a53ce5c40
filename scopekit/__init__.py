"""scopekit - hierarchical scope outlines with AI-assisted expansion.

Scopes (tasks) live in folders (projects). Large subtrees can be produced
or replaced by a text-generation collaborator; the engine keeps the tree
consistent (derived status, stable ordering, reversible history).
"""

__version__ = "0.1.0"
