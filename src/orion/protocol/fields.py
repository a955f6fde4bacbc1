"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling.
"""

# Top-level keys of every outbound message, in wire order.
METHOD = "method"
VALUE = "value"

# Operations understood by the Orion service.
INSERT = "insert"
INSERT_MANY = "insertMany"
UPDATE = "update"
REMOVE = "remove"
GET = "get"
SEARCH = "search"
