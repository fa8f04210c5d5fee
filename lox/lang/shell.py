"""Handles interactive mode for the lox interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """Lox interpreter shell."""
    intro = "Lox interpreter :: Python backend\nType 'help' for more information, 'exit' or Ctrl-D to leave."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations
    COMMANDS = ("exit", "help", "EOF")  # only ever commands when typed alone on a line

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self._tmp_line = ""

    def onecmd(self, line):
        """Only a line consisting of a bare word from COMMANDS is a shell command. Every other line is lox source, even
        when it starts with one of those words (`help();`, `exit = 2;`). Ctrl-D (EOF) always leaves.
        """
        stripped = line.strip()
        if stripped == "EOF" or (stripped in Shell.COMMANDS and not self._tmp_line):
            return super().onecmd(stripped)
        if not stripped and not self._tmp_line:
            return self.emptyline()
        return self.default(line)

    def default(self, line):
        """Executes arbitrary lox source."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            line, add_to_prev = self.sess.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
            else:
                self._tmp_line = ""
                self.prompt = self._tmp_prompt
                self.sess.run_line(line)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the lox interpreter!\n\n"
              "Lox is a small dynamically typed scripting language with first-class functions, \n"
              "closures and classes. Statements end with ';'. Try typing 'var a = 1;' and then \n"
              "'print a + 2;'. A bare expression such as 'a * 10;' echoes its value. Unclosed \n"
              "braces continue on the next line.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
