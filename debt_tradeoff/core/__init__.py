"""Pure financial math and the Monte Carlo simulator."""
