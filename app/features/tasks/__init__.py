"""Tasks feature module: kanban pipeline and comments"""
