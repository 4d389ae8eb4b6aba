"""JSON translation catalogues shared by the backend and the browser UI."""
