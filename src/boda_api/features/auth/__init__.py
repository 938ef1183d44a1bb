"""Registration, password login and cookie sessions."""
