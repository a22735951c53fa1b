"""Resolution of resource references to pod sets.

Exposes:
    normalize          -- Shorthand kind names to ResourceKind.
    selector_for       -- Label selector for a cached object.
    OwnershipResolver  -- Reference to pods, via replica sets for deployments.
    ResourceResolver   -- Facade used by the REST layer.
"""

from podscope.resolver.facade import ResourceResolver
from podscope.resolver.names import normalize
from podscope.resolver.ownership import OwnershipResolver
from podscope.resolver.selectors import selector_for

__all__ = ["OwnershipResolver", "ResourceResolver", "normalize", "selector_for"]
