"""0.1.0.2026.1018.1200.00"""