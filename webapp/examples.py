from __future__ import annotations

from typing import Dict, List

# Programs offered in the editor's example menu. Raw strings keep `\n` escapes in the Java text.

DEFAULT_PROGRAM = r"""import java.util.Scanner;

public class Main {
    public static void main(String[] args) {
        System.out.println("🚀 Welcome to QuickJava Compiler!");
        System.out.println("================================");

        // Create scanner for input
        Scanner scanner = new Scanner(System.in);

        // Simple calculator example
        System.out.println("\n🔢 Simple Calculator");
        System.out.print("Enter first number: ");
        double num1 = 15; // scanner.nextDouble();

        System.out.print("Enter second number: ");
        double num2 = 7; // scanner.nextDouble();

        System.out.println("\n📊 Results:");
        System.out.println(num1 + " + " + num2 + " = " + (num1 + num2));
        System.out.println(num1 + " - " + num2 + " = " + (num1 - num2));
        System.out.println(num1 + " * " + num2 + " = " + (num1 * num2));
        System.out.println(num1 + " / " + num2 + " = " + (num1 / num2));

        // Loop example
        System.out.println("\n🔄 Loop Example (1 to 5):");
        for(int i = 1; i <= 5; i++) {
            System.out.println("Count: " + i);
        }

        System.out.println("\n✅ Program executed successfully!");
        System.out.println("💡 Try modifying the code and run again!");

        // scanner.close();
    }
}"""

BASIC_PROGRAM = r"""public class Main {
    public static void main(String[] args) {
        System.out.println("Hello, World!");
        System.out.println("Welcome to Java Programming!");
    }
}"""

LOOPS_PROGRAM = r"""public class Main {
    public static void main(String[] args) {
        // Array example
        int[] numbers = {10, 20, 30, 40, 50};

        System.out.println("Array elements:");
        for(int i = 0; i < numbers.length; i++) {
            System.out.println("numbers[" + i + "] = " + numbers[i]);
        }

        // Enhanced for loop
        System.out.println("\nUsing enhanced for loop:");
        for(int num : numbers) {
            System.out.println("Number: " + num);
        }

        // While loop
        System.out.println("\nWhile loop (5 to 1):");
        int count = 5;
        while(count > 0) {
            System.out.println("Countdown: " + count);
            count--;
        }
    }
}"""

CALCULATOR_PROGRAM = r"""import java.util.Scanner;

public class Main {
    public static void main(String[] args) {
        Scanner scanner = new Scanner(System.in);

        System.out.println("🖩 Simple Calculator");
        System.out.println("====================");

        System.out.print("Enter first number: ");
        double num1 = 25; // scanner.nextDouble();

        System.out.print("Enter second number: ");
        double num2 = 5; // scanner.nextDouble();

        System.out.println("\nChoose operation:");
        System.out.println("1. Addition (+)");
        System.out.println("2. Subtraction (-)");
        System.out.println("3. Multiplication (*)");
        System.out.println("4. Division (/)");
        System.out.print("Enter choice (1-4): ");
        int choice = 1; // scanner.nextInt();

        double result = 0;
        String operation = "";

        switch(choice) {
            case 1:
                result = num1 + num2;
                operation = "+";
                break;
            case 2:
                result = num1 - num2;
                operation = "-";
                break;
            case 3:
                result = num1 * num2;
                operation = "*";
                break;
            case 4:
                if(num2 != 0) {
                    result = num1 / num2;
                    operation = "/";
                } else {
                    System.out.println("Error: Division by zero!");
                    return;
                }
                break;
            default:
                System.out.println("Invalid choice!");
                return;
        }

        System.out.println("\n📊 Result:");
        System.out.println(num1 + " " + operation + " " + num2 + " = " + result);

        // scanner.close();
    }
}"""

PATTERNS_PROGRAM = r"""public class Main {
    public static void main(String[] args) {
        System.out.println("🌟 Star Patterns");
        System.out.println("================");

        // Pattern 1: Right triangle
        System.out.println("\nPattern 1: Right Triangle");
        for(int i = 1; i <= 5; i++) {
            for(int j = 1; j <= i; j++) {
                System.out.print("* ");
            }
            System.out.println();
        }

        // Pattern 2: Pyramid
        System.out.println("\nPattern 2: Pyramid");
        int rows = 4;
        for(int i = 1; i <= rows; i++) {
            // Spaces
            for(int j = rows; j > i; j--) {
                System.out.print(" ");
            }
            // Stars
            for(int k = 1; k <= (2*i - 1); k++) {
                System.out.print("*");
            }
            System.out.println();
        }

        // Pattern 3: Number pattern
        System.out.println("\nPattern 3: Number Triangle");
        for(int i = 1; i <= 5; i++) {
            for(int j = 1; j <= i; j++) {
                System.out.print(j + " ");
            }
            System.out.println();
        }
    }
}"""

COLLEGE_PROGRAM = r"""import java.util.Scanner;

public class Main {
    public static void main(String[] args) {
        // College Practical Example
        System.out.println("🎓 College Lab Practical");
        System.out.println("========================");

        // Example: Student Grade Calculator
        String[] subjects = {"Math", "Physics", "Chemistry", "English", "Computer"};
        int[] marks = {85, 78, 92, 88, 95};

        System.out.println("\n📚 Subject Marks:");
        int total = 0;
        for(int i = 0; i < subjects.length; i++) {
            System.out.println(subjects[i] + ": " + marks[i] + "/100");
            total += marks[i];
        }

        double percentage = (double) total / subjects.length;
        char grade;

        if(percentage >= 90) grade = 'A';
        else if(percentage >= 80) grade = 'B';
        else if(percentage >= 70) grade = 'C';
        else if(percentage >= 60) grade = 'D';
        else grade = 'F';

        System.out.println("\n📊 Result Summary:");
        System.out.println("Total Marks: " + total + "/500");
        System.out.println("Percentage: " + String.format("%.2f", percentage) + "%");
        System.out.println("Grade: " + grade);

        // Array operations
        System.out.println("\n🔢 Array Operations:");
        int[] numbers = {12, 45, 78, 23, 56, 89, 34};

        // Find max and min
        int max = numbers[0];
        int min = numbers[0];
        for(int num : numbers) {
            if(num > max) max = num;
            if(num < min) min = num;
        }

        System.out.println("Array: " + java.util.Arrays.toString(numbers));
        System.out.println("Maximum: " + max);
        System.out.println("Minimum: " + min);

        System.out.println("\n✅ Practical completed successfully!");
    }
}"""

EXAMPLES: Dict[str, str] = {
	"default": DEFAULT_PROGRAM,
	"basic": BASIC_PROGRAM,
	"loops": LOOPS_PROGRAM,
	"calculator": CALCULATOR_PROGRAM,
	"patterns": PATTERNS_PROGRAM,
	"college": COLLEGE_PROGRAM,
}


def example_names() -> List[str]:
	return list(EXAMPLES.keys())


def get_example(name: str) -> str:
	"""Return the program stored under `name`. Raises KeyError for unknown names."""
	return EXAMPLES[name.lower()]
