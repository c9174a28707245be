"""HTTP blueprints of the simulator API."""
