"""
Command line entry point for Photo Albums.
Logs in as a user, runs one album/photo command, then logs out.
"""

import argparse
import logging
import sys
from datetime import date, datetime

from photo_albums.config.config import ConfigManager
from photo_albums.store.library import ActionResult, PhotoLibrary
from photo_albums.store.user_store import UserStore


def main(argv=None):
    """Main entry point with argument parsing and command routing."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse exits 0 for --help and 2 on a usage error
        return 0 if not e.code else 1

    try:
        config = ConfigManager()
        if args.config:
            config.load(args.config)
        setup_logging(args.verbose, config)

        store = UserStore(data_dir=args.data_dir, config=config)
        library = PhotoLibrary(store, config)

        login = library.login(args.user)
        if not login:
            print(login.message)
            return 1
        try:
            return COMMANDS[args.command](library, args)
        finally:
            library.logout()

    except KeyboardInterrupt:
        print("\nOperation interrupted")
        return 0
    except Exception as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


def build_parser():
    parser = argparse.ArgumentParser(
        prog='photo-albums',
        description='Photo Albums - organize photos into albums per user',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --user admin create-user alice
  %(prog)s --user alice create-album Holidays
  %(prog)s --user alice add-photo Holidays ~/Pictures/beach.jpg
  %(prog)s --user alice tag Holidays ~/Pictures/beach.jpg location Nice
  %(prog)s --user alice search-tag "location=nice OR person=bob"
  %(prog)s --user alice search-date 2023-07-01 2023-07-31
        """
    )

    parser.add_argument('--config', help='Path to configuration file')
    parser.add_argument('--data-dir', help='Directory holding the users snapshot')
    parser.add_argument('--user', '-u', required=True, help='User to log in as')
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose logging')

    commands = parser.add_subparsers(dest='command', metavar='COMMAND')
    commands.required = True

    # Administration
    commands.add_parser('users', help='List all users (admin only)')
    sub = commands.add_parser('create-user', help='Create a user (admin only)')
    sub.add_argument('username')
    sub = commands.add_parser('delete-user', help='Delete a user (admin only)')
    sub.add_argument('username')

    # Albums
    commands.add_parser('albums', help='List albums with photo counts and dates')
    sub = commands.add_parser('photos', help='List the photos in an album')
    sub.add_argument('album')
    sub = commands.add_parser('create-album', help='Create an album')
    sub.add_argument('name')
    sub = commands.add_parser('rename-album', help='Rename an album')
    sub.add_argument('name')
    sub.add_argument('new_name')
    sub = commands.add_parser('delete-album', help='Delete an album')
    sub.add_argument('name')

    # Photos
    sub = commands.add_parser('add-photo', help='Add an image file to an album')
    sub.add_argument('album')
    sub.add_argument('path')
    sub = commands.add_parser('remove-photo', help='Remove a photo from an album')
    sub.add_argument('album')
    sub.add_argument('path')
    for name, verb in (('copy-photo', 'Copy'), ('move-photo', 'Move')):
        sub = commands.add_parser(name, help=f'{verb} a photo to another album')
        sub.add_argument('album')
        sub.add_argument('target')
        sub.add_argument('path')
    sub = commands.add_parser('caption', help='Set the caption of a photo')
    sub.add_argument('album')
    sub.add_argument('path')
    sub.add_argument('caption')
    sub = commands.add_parser('tag', help='Add or replace a tag on a photo')
    sub.add_argument('album')
    sub.add_argument('path')
    sub.add_argument('tag_type')
    sub.add_argument('tag_value')
    sub = commands.add_parser('untag', help='Remove a tag from a photo')
    sub.add_argument('album')
    sub.add_argument('path')
    sub.add_argument('tag_type')

    # Search
    sub = commands.add_parser('search-date', help='Photos taken between two dates')
    sub.add_argument('start', type=parse_date, help='YYYY-MM-DD')
    sub.add_argument('end', type=parse_date, help='YYYY-MM-DD')
    sub = commands.add_parser('search-tag', help='Photos matching a tag query')
    sub.add_argument('query', help='type=value, optionally joined by AND/OR')

    return parser


def parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD")


def report(result: ActionResult) -> int:
    print(result.message)
    return 0 if result.ok else 1


def print_photos(photos) -> int:
    if not photos:
        print("No photos found.")
        return 0
    for photo in photos:
        tags = ", ".join(f"{k}={v}" for k, v in photo.tags.items())
        line = f"{photo.date_time:%Y-%m-%d %H:%M}  {photo.file_path}"
        if photo.caption:
            line += f"  \"{photo.caption}\""
        if tags:
            line += f"  [{tags}]"
        print(line)
    return 0


def run_users(library, args):
    if not library.store.is_current_admin():
        print("Only the admin can manage users.")
        return 1
    for user in library.list_users():
        print(user.username)
    return 0


def run_albums(library, args):
    albums = library.list_albums()
    if not albums:
        print("No albums.")
    for album in albums:
        line = f"{album.name}  ({album.photo_count} photos)"
        if album.photo_count:
            line += f"  {album.earliest_date:%Y-%m-%d} to {album.latest_date:%Y-%m-%d}"
        print(line)
    return 0


def run_photos(library, args):
    album = library.user.get_album(args.album)
    if album is None:
        print(f"Album not found: {args.album}")
        return 1
    return print_photos(album.photos)


COMMANDS = {
    'users': run_users,
    'create-user': lambda lib, a: report(lib.create_user(a.username)),
    'delete-user': lambda lib, a: report(lib.delete_user(a.username)),
    'albums': run_albums,
    'photos': run_photos,
    'create-album': lambda lib, a: report(lib.create_album(a.name)),
    'rename-album': lambda lib, a: report(lib.rename_album(a.name, a.new_name)),
    'delete-album': lambda lib, a: report(lib.delete_album(a.name)),
    'add-photo': lambda lib, a: report(lib.add_photo(a.album, a.path)),
    'remove-photo': lambda lib, a: report(lib.remove_photo(a.album, a.path)),
    'copy-photo': lambda lib, a: report(lib.copy_photo(a.album, a.target, a.path)),
    'move-photo': lambda lib, a: report(lib.move_photo(a.album, a.target, a.path)),
    'caption': lambda lib, a: report(lib.set_caption(a.album, a.path, a.caption)),
    'tag': lambda lib, a: report(lib.add_tag(a.album, a.path, a.tag_type, a.tag_value)),
    'untag': lambda lib, a: report(lib.remove_tag(a.album, a.path, a.tag_type)),
    'search-date': lambda lib, a: print_photos(lib.search_by_date(a.start, a.end)),
    'search-tag': lambda lib, a: print_photos(lib.search_by_tag(a.query)),
}


def setup_logging(verbose: bool, config: ConfigManager = None):
    """Setup logging configuration."""
    level_name = config.get("logging.level", "INFO") if config else "INFO"
    level = logging.DEBUG if verbose else getattr(logging, str(level_name).upper(), logging.INFO)

    kwargs = {}
    if config and config.get("logging.log_to_file"):
        kwargs['filename'] = config.get("logging.log_file", "photo_albums.log")

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        **kwargs
    )


if __name__ == '__main__':
    sys.exit(main())
