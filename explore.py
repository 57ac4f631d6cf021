import math
import os
import sys
import warnings
from argparse import ArgumentParser

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")
    for handler in tf.get_logger().handlers:
        handler.setLevel("ERROR")

from matplotlib import colormaps

from mandelview import ExplorerConfig, ExplorerSession, parse_color


def build_parser():
    parser = ArgumentParser(description="Explore the Mandelbrot set: scroll to zoom, drag to pan, 'r' to reset.")

    parser.add_argument('--width', type=int,
                        dest='width', help='width of the drawing surface in pixels',
                        metavar='WIDTH', default=800)

    parser.add_argument('--height', type=int,
                        dest='height', help='height of the drawing surface in pixels',
                        metavar='HEIGHT', default=800)

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='iteration bound of the escape-time test',
                        metavar='MAX_ITERATIONS', default=100)

    parser.add_argument('--zoom', type=float,
                        dest='zoom', help='initial zoom, must be strictly positive',
                        metavar='ZOOM', default=0.5)

    parser.add_argument('--offset-x', type=float,
                        dest='offset_x', help='initial real offset of the view',
                        metavar='OFFSET_X', default=0.0)

    parser.add_argument('--offset-y', type=float,
                        dest='offset_y', help='initial imaginary offset of the view',
                        metavar='OFFSET_Y', default=0.0)

    parser.add_argument('--coloring', choices=['flat', 'smooth'], default='flat',
                        help='"flat" paints the set in a single hue; "smooth" shades escaped points by iteration count.')

    parser.add_argument('--colormap', type=str,
                        dest='colormap', help='matplotlib colormap used by the smooth coloring',
                        metavar='COLORMAP', default='twilight_shifted')

    parser.add_argument('--inside-color', type=str, default='#000000',
                        help='Color for points inside the set with the smooth coloring.')

    parser.add_argument('--background', type=str, default='#000000',
                        help='Color for escaped points with the flat coloring.')

    parser.add_argument('--coalesce', action='store_true',
                        help='Render once after a burst of input events instead of once per event.')

    parser.add_argument('--coalesce-ms', type=int, default=60, dest='coalesce_ms',
                        help='Quiet period in milliseconds before a coalesced render runs.')

    parser.add_argument('--device', type=str, default='/CPU:0',
                        help='TensorFlow device used for the escape-time evaluation.')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and render diagnostics.')

    return parser


def resolve_config(opt, parser: ArgumentParser) -> ExplorerConfig:
    if opt.width <= 0 or opt.height <= 0:
        parser.error("--width and --height must be positive.")
    if opt.max_iterations < 0:
        parser.error("--max-iterations must not be negative.")
    if not math.isfinite(opt.zoom) or opt.zoom <= 0:
        parser.error("--zoom must be finite and strictly positive.")
    if not (math.isfinite(opt.offset_x) and math.isfinite(opt.offset_y)):
        parser.error("--offset-x and --offset-y must be finite.")
    if opt.coalesce_ms <= 0:
        parser.error("--coalesce-ms must be positive.")

    for flag, value in (("--inside-color", opt.inside_color), ("--background", opt.background)):
        try:
            parse_color(value)
        except ValueError:
            parser.error(f"{flag} {value!r} is not a color Pillow understands.")

    if opt.coloring == 'smooth' and opt.colormap not in colormaps:
        parser.error(f"Unknown colormap '{opt.colormap}'.")

    return ExplorerConfig(
        width=opt.width,
        height=opt.height,
        max_iterations=opt.max_iterations,
        zoom=opt.zoom,
        offset_x=opt.offset_x,
        offset_y=opt.offset_y,
        coloring=opt.coloring,
        colormap=opt.colormap,
        inside_color=opt.inside_color,
        background=opt.background,
        coalesce=bool(opt.coalesce),
        device=opt.device,
    )


class FigureHost:
    """Matplotlib window showing the surface and feeding gestures to the session."""

    def __init__(self, config: ExplorerConfig, coalesce_ms: int) -> None:
        import matplotlib.pyplot as plt

        self._plt = plt
        self.figure, self.axes = plt.subplots(figsize=(config.width / 100, config.height / 100), dpi=100)
        self.axes.set_axis_off()
        self.figure.subplots_adjust(left=0, right=1, top=1, bottom=0)

        self.timer = None
        arm = None
        if config.coalesce:
            self.timer = self.figure.canvas.new_timer(interval=coalesce_ms)
            self.timer.single_shot = True
            self.timer.add_callback(self._flush)
            arm = self._arm

        self.session = ExplorerSession(config, arm=arm, on_rendered=self._on_rendered)
        self.image = self.axes.imshow(self.session.surface.pixels, interpolation='nearest')
        self._dragging = False
        self._last = None

        canvas = self.figure.canvas
        canvas.mpl_connect('scroll_event', self.on_scroll)
        canvas.mpl_connect('button_press_event', self.on_press)
        canvas.mpl_connect('button_release_event', self.on_release)
        canvas.mpl_connect('motion_notify_event', self.on_motion)
        canvas.mpl_connect('key_press_event', self.on_key)

    def _arm(self):
        self.timer.stop()
        self.timer.start()

    def _flush(self):
        self.session.scheduler.flush()

    def _on_rendered(self, elapsed):
        zoom, offset_x, offset_y = self.session.viewport.snapshot()
        log("render {0}: {1:.3f}s zoom={2:.6g} offset=({3:.6g}, {4:.6g})".format(
            self.session.render_count, elapsed, zoom, offset_x, offset_y))
        self.image.set_data(self.session.surface.pixels)
        self.figure.canvas.draw_idle()

    def _report(self, applied):
        if not applied and self.session.controller.last_rejection is not None:
            log("ignored gesture: %s" % self.session.controller.last_rejection)

    def on_scroll(self, event):
        if event.xdata is None or event.ydata is None:
            return
        # matplotlib reports scrolling down as a negative step
        self._report(self.session.controller.on_zoom(event.xdata, event.ydata, -event.step))

    def on_press(self, event):
        if event.button == 1 and event.xdata is not None:
            self._dragging = True
            self._last = (event.xdata, event.ydata)

    def on_release(self, event):
        if event.button == 1:
            self._dragging = False
            self._last = None

    def on_motion(self, event):
        if not self._dragging or event.xdata is None or event.ydata is None:
            return
        last_x, last_y = self._last
        self._last = (event.xdata, event.ydata)
        self._report(self.session.controller.on_pan(event.xdata - last_x, event.ydata - last_y))

    def on_key(self, event):
        if event.key == 'r':
            self.session.reset()

    def show(self):
        self.session.render()
        self._plt.show()


def main():
    parser = build_parser()
    opt = parser.parse_args()
    config = resolve_config(opt, parser)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    log("TensorFlow version: %s" % tf.__version__)
    gpus = tf.config.list_physical_devices('GPU')
    log("GPUs visible: %s, rendering on %s" % (len(gpus), config.device))
    log("config: %s" % (config,))

    FigureHost(config, opt.coalesce_ms).show()


if __name__ == '__main__':
    main()
