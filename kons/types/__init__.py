"""Runtime data model: values, cons cells, functions and environments."""
