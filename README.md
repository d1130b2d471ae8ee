# livebg

A Python client for a running live wallpaper daemon. The daemon listens on a
UNIX domain socket, by default `/tmp/xlivebg.sock`. This package speaks the
daemon's line-based control protocol. With it you can:

- list the installed wallpapers and the properties each one exposes
- switch the active wallpaper
- read and change global settings: background image, animation mask,
  background colour and gradient mode, image fit and crop, frame rate
- read and change each wallpaper's own properties
- ask the daemon to save its configuration file

## Installation

```
pip install .
```

The package needs no third-party libraries. To run the test suite:

```
pip install .[test]
pytest
```

## Command line

```
livebg [--socket PATH] [--switch NAME] [--save]
```

The command pings the daemon first. If there is no answer, it prints
`No response from xlivebg. Make sure it's running!` and exits with status 1.
Otherwise it:

1. fetches the wallpaper list and each wallpaper's property list;
2. switches to `NAME`, if `--switch` was given;
3. prints the wallpapers, with `*` marking the active one;
4. prints the global settings: image, animation mask, background mode,
   colours, fit, crop zoom and pan, and frame rate (marked `(forced)` when
   forced);
5. prints the current value of each property of the active wallpaper;
6. asks the daemon to save its configuration, if `--save` was given, and
   prints the path of the file it writes when the daemon reports one.

`--socket` selects a different control socket. The exit status is 1 when a
request fails.

## Library use

### Talking to the daemon

```python
from livebg.protocol import ControlClient, ControlError

client = ControlClient("/tmp/xlivebg.sock")

try:
    if not client.ping():
        print("the daemon answered, but not with OK")
except ControlError:
    print("the wallpaper daemon is not responding")

speed = client.getprop_num("xlivebg.minimal.speed")
client.setprop_num("xlivebg.minimal.speed", 2.5)
client.setprop_vec("xlivebg.color", (0.1, 0.2, 0.3, 1.0))
print(client.cfgpath())
client.save()
```

Every request opens its own connection. A failed request raises
`ControlError`. This covers a socket that cannot be reached, a reply other
than `OK!`, and a truncated or empty reply. `ping` is the exception: it
returns `False` for a reply other than `OK!` and raises only when there is no
reply.

Getters:

- `getprop_str`
- `getprop_int`
- `getprop_num`
- `getprop_vec`, which always returns four components and pads with zeros
- `getupd`, which returns the update interval in microseconds

Setters: `setprop_str`, `setprop_int`, `setprop_num` and `setprop_vec`.
`rmprop` removes a property. `list_wallpapers` and `proplist` return the raw
reply text.

### Browsing wallpapers

```python
from livebg.protocol import ControlClient
from livebg.wallpapers import WallpaperCatalog

catalog = WallpaperCatalog(ControlClient("/tmp/xlivebg.sock"))
catalog.refresh()

for wallpaper in catalog:
    print(wallpaper.name, wallpaper.desc)
    for prop in wallpaper.properties:
        print("  ", prop.fullname, prop.type.name)

current = catalog.active()
catalog.switch("minimal")
```

Wallpapers are `Wallpaper` objects and their properties are `Property`
objects. `PropType` lists the property kinds:

- boolean
- text
- number
- integer
- color
- filename
- dirname
- pathname

You can parse the daemon's `list` and `lsprop` replies without a connection,
using `parse_wallpaper_list` and `parse_proplist`. `parse_proplist` skips
invalid properties and logs a warning for each one. It raises `ValueError`
when the text cannot be parsed at all.

### Settings

`SettingsController.load()` reads the global settings into a snapshot. That
snapshot covers background mode (`BackgroundMode`), colours, fit mode
(`FitMode`), crop zoom and pan, and frame rate.

The `set_*` methods send single changes. `set_fps` and the per-property
setters (`set_number_property`, `set_integer_property`, `set_bool_property`,
`set_color_property`) send a change only when the value differs from the
one last known, and return whether they sent it. `property_values` reads
the current values of a wallpaper's properties. `clean_path` trims a path
value returned by the daemon.

### Colours

`livebg.colors` has the HSV/RGB conversions. All components are in the range
0 to 1, and `rgb_to_hsv` reports a hue of -1 for black:

```python
from livebg.colors import hsv_to_rgb, rgb_to_hsv

r, g, b = hsv_to_rgb(0.5, 1.0, 1.0)
h, s, v = rgb_to_hsv(r, g, b)
```

`anim_color` gives the cycling colour of the minimal example wallpaper.
`colorbox_pixels` and `huebar_pixels` produce the packed `0xRRGGBB` rows of
a colour picker image, with the selected hue, saturation and value inverted.

### UI helpers

`livebg.uitools` holds toolkit-independent helpers:

- `slider_scale`, `slider_to_value` and `value_to_slider` map fractional
  ranges onto integer sliders
- `browse_start_dir` picks the directory a file browser should open in
- `select_option` makes a bounds-checked choice from a list

## What this package does not do

- It has no graphical configuration window. The command line tool prints
  settings and can switch wallpapers and save. Finer changes go through the
  library.
- It does not render wallpapers and is not the daemon itself. It only talks
  to a daemon that is already running.