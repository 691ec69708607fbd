"""Pipeline stages: report loading, flattening, path reconciliation,
package resolution, duplicate aggregation.

Each stage exposes a small function API and consumes only the previous
stage's output.
"""
