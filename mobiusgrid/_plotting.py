"""Static views of lattice frames (requires matplotlib)"""
import logging
import os

import numpy

from mobiusgrid._backend import _color_scalar

try:
    import matplotlib
    from matplotlib import pyplot
    from matplotlib import cm
except ImportError:
    logging.warning("Plotting functions are unavailable. To use install "
                    "matplotlib, install using ex. `pip install matplotlib` ")
    matplotlib_available = False
else:
    matplotlib_available = True


def color_scalar(z, amplitude):
    """
    Map heights to [0, 1] for colour lookup: 0.5 is the rest plane and the
    ends of the range are +-amplitude. A zero amplitude maps everything to
    0.5.
    """
    return _color_scalar(numpy, numpy.asarray(z, dtype=float), amplitude)


def plot_frame(positions, colors=None, fig=None, ax=None, show=False,
               save_fig=False, strpath=None, plot_path='fig/',
               fig_name='frame.pdf', pointsize=5, connect_cells=False):
    """
    Scatter one frame of lattice positions in 3D.

    :param positions: ndarray of shape (N, 3)
    :param colors: ndarray of shape (N,), scalars in [0, 1]; taken from the
                   heights when None
    :param fig: pyplot figure to draw into, a new one when None
    :param ax: 3D axes to draw into, a new one when None
    :param show: call pyplot.show()
    :param save_fig: save the figure to strpath, or plot_path + fig_name
    :param connect_cells: draw a polyline through the points in cell order
                          (the Hilbert path on power-of-two grids)
    :return: fig, ax
    """
    if not matplotlib_available:
        logging.warning("Plotting functions are unavailable. To "
                        "install matplotlib install using ex. `pip install "
                        "matplotlib` ")
        return None, None

    positions = numpy.asarray(positions, dtype=float).reshape(-1, 3)
    if colors is None:
        zmax = numpy.max(numpy.abs(positions[:, 2])) if len(positions) else 0.0
        colors = color_scalar(positions[:, 2], zmax)

    if fig is None:
        fig = pyplot.figure()
    if ax is None:
        ax = fig.add_subplot(111, projection='3d')

    ax.scatter(positions[:, 0], positions[:, 1], positions[:, 2],
               c=cm.plasma(numpy.asarray(colors)), s=pointsize)
    if connect_cells and len(positions) > 1:
        ax.plot(positions[:, 0], positions[:, 1], positions[:, 2],
                color='k', linewidth=0.5, alpha=0.5)

    ax.set_xlabel('$x$')
    ax.set_ylabel('$y$')
    ax.set_zlabel('$z$')

    if save_fig:
        if strpath is None:
            script_dir = os.getcwd()
            results_dir = os.path.join(script_dir, plot_path)
            if not os.path.isdir(results_dir):
                os.makedirs(results_dir)
            strpath = os.path.join(results_dir, fig_name)
        fig.savefig(strpath, transparent=True, bbox_inches='tight',
                    pad_inches=0)

    if show:
        pyplot.show()

    return fig, ax


def animate_lattice(lattice, frames=200, interval=20, dt=None,
                    path="parallel", fig=None, ax=None, pointsize=5,
                    show=False):
    """
    Animate a Lattice, one ``lattice.step`` per animation frame.

    :param lattice: mobiusgrid.Lattice to drive
    :param frames: number of frames, or any iterable accepted by FuncAnimation
    :param interval: delay between frames in milliseconds
    :param dt: clock increment per frame, the Lattice default when None
    :param path: evaluation path passed to lattice.step
    :return: fig, ax, anim
    """
    if not matplotlib_available:
        logging.warning("Plotting functions are unavailable. To "
                        "install matplotlib install using ex. `pip install "
                        "matplotlib` ")
        return None, None, None
    from matplotlib.animation import FuncAnimation

    step_kwargs = {"path": path}
    if dt is not None:
        step_kwargs["dt"] = dt

    positions = lattice.positions(path=path)
    fig, ax = plot_frame(positions, colors=lattice.colors(positions),
                         fig=fig, ax=ax, pointsize=pointsize)
    scatter = ax.collections[-1]

    # Fixed z range so the wave is visible against the rest plane
    zlim = max(1.0, 2.0 * lattice.params.amplitude)
    ax.set_zlim(-zlim, zlim)

    def update(frame):
        p = lattice.step(**step_kwargs)
        scatter._offsets3d = (p[:, 0], p[:, 1], p[:, 2])
        scatter.set_color(cm.plasma(lattice.colors(p)))
        ax.set_title(f"t = {lattice.time:.2f}")
        return (scatter,)

    anim = FuncAnimation(fig, update, frames=frames, interval=interval,
                         blit=False, cache_frame_data=False)
    if show:
        pyplot.show()

    return fig, ax, anim
