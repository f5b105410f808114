"""
Low-level APIs for individual Cloud Controller resources.

Each public function in this module should:

- perform a single API call or lookup, idempotently if possible
- raise an exception on any failures
- accept an API client as an argument rather than creating its own

Each function also falls into one of two groups:

- getters (prefixed with `get_`, returns a value directly, does not modify state)
- actions (returns a `Result` object, may modify state)
"""
