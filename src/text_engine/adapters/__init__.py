"""Host adapters driving sessions from UI toolkits."""
