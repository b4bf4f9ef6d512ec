"""Front ends that host an EditorSession."""
