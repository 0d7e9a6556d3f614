"""Engine services: persistence, statistics, tasks, insights and the coach."""
