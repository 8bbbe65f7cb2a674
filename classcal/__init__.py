"""ClassCal – class schedule calendar with Meet links and offline fallback."""
