"""Main CLI entry point for armcross tooling."""

import sys

from armcross_tooling.cli import arm32_cmd, emulator_cmd


def main() -> None:
    """Main CLI entry point."""
    if len(sys.argv) < 2:
        print("Usage: armcross <command> [args...]", file=sys.stderr)
        print("Commands:", file=sys.stderr)
        print(
            "  build    - Mount the emulator rootfs and cross build core-setup in Docker",
            file=sys.stderr,
        )
        print(
            "  mount    - Mount the emulator rootfs, proc, dev, dev/pts, shm and sys",
            file=sys.stderr,
        )
        print("  unmount  - Unmount everything `mount` brought up", file=sys.stderr)
        print("Run `armcross build --help` for flags.", file=sys.stderr)
        sys.exit(1)

    command = sys.argv[1]

    if command == "build":
        arm32_cmd.run_arm32_argv()
    elif command in ("mount", "unmount"):
        emulator_cmd.run_emulator_argv(command)
    else:
        print(f"Error: Unknown command: {command}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
