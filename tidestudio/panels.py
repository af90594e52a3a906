"""panels.py — Which tab/panel pair is showing."""

from . import viewport

PANELS = ("models", "migrations", "seeders", "database", "query")


class PanelNavigator:
    def __init__(self, view, panels=PANELS, initial=None):
        self.view = view
        self.panels = tuple(panels)
        self.active = initial or self.panels[0]
        if self.active not in self.panels:
            raise ValueError(f"Unknown panel: {self.active}")

    def render(self):
        for panel_id in self.panels:
            state = viewport.ACTIVE if panel_id == self.active else viewport.INACTIVE
            self.view.set_status(f"tab-{panel_id}", state)
            self.view.set_status(f"panel-{panel_id}", state)

    def switch(self, panel_id):
        if panel_id not in self.panels:
            raise ValueError(f"Unknown panel: {panel_id}")
        previous, self.active = self.active, panel_id
        if previous != panel_id:
            self.view.set_status(f"tab-{previous}", viewport.INACTIVE)
            self.view.set_status(f"panel-{previous}", viewport.INACTIVE)
        self.view.set_status(f"tab-{panel_id}", viewport.ACTIVE)
        self.view.set_status(f"panel-{panel_id}", viewport.ACTIVE)
        return previous
