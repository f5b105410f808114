"""
Higher-level flows that reconcile platform resources.

Each public function in this module should:

- perform a complete task, as needed by a script
- avoid non-idempotent calls unless required by a prior state change
- look up each resource at most once, and pass the result down to plumbing
"""
