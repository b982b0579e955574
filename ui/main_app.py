# ui/main_app.py
from typing import Optional

import gi

gi.require_version("Gtk", "4.0")
from gi.repository import Gtk

from goresume.commands import RestoreState
from goresume.game import Game
from goresume.goban_model import point_to_vertex
from goresume.session import GameSession


def describe_game(game: Optional[Game]) -> str:
    if game is None:
        return "No game"
    text = f"{game.size}x{game.size}, komi {game.config.komi:g}, move {game.current_position}/{len(game.moves)}"
    if game.current_position:
        last = game.moves[game.current_position - 1]
        text += f" ({last.color} {'pass' if last.is_pass else point_to_vertex(last.point, game.size)})"
    if game.result:
        text += f", result {game.result}"
    return text


class MainWindow(Gtk.ApplicationWindow):
    def __init__(self, app, session: GameSession, restored: bool):
        super().__init__(application=app, title="goresume")
        self.set_default_size(480, 120)
        self.session = session

        vbox = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=6)
        origin = "Resumed game" if restored else "New game"
        self.label = Gtk.Label(label=f"{origin}: {describe_game(session.game)}")
        vbox.append(self.label)

        btn_new = Gtk.Button(label="New game")
        btn_new.connect("clicked", self._on_new_game)
        vbox.append(btn_new)
        self.set_child(vbox)

    def _on_new_game(self, _button):
        game = self.session.new_game()
        self.label.set_label(f"New game: {describe_game(game)}")


class App(Gtk.Application):
    """Restores the game on startup and backs it up on shutdown."""

    def __init__(self, session: Optional[GameSession] = None):
        super().__init__(application_id="org.goresume.app")
        self.session = session or GameSession.from_settings()
        self.restore_outcome: Optional[RestoreState] = None

    def do_startup(self):
        Gtk.Application.do_startup(self)
        self.restore_outcome = self.session.startup()

    def do_activate(self):
        win = MainWindow(self, self.session, self.restore_outcome is RestoreState.RESTORED)
        win.present()

    def do_shutdown(self):
        self.session.suspend()
        Gtk.Application.do_shutdown(self)


def main():
    app = App()
    return app.run(None)


if __name__ == "__main__":
    raise SystemExit(main())
